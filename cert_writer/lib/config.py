"""Generator and writer configuration dataclasses."""

import sys
from dataclasses import dataclass
from typing import TYPE_CHECKING, TextIO

from cryptography import x509
from cryptography.x509 import oid

from .errors import ConfigurationError
from .models import RecordIdentifier

if TYPE_CHECKING:
    from .generator import CertGenerator
    from .record_store import RecordStore


@dataclass
class GeneratorConfig:
    """Self-signed generator settings with no AWS dependencies."""

    ca_common_name: str = "webhook-cert-ca"
    organization: str = ""
    ca_validity_years: int = 10
    cert_validity_days: int = 365
    key_size: int = 2048


@dataclass
class DistinguishedName:
    """X.509 Subject Distinguished Name."""

    common_name: str
    organization: str = ""

    def to_x509_name(self) -> x509.Name:
        """Convert to cryptography x509.Name, omitting an empty organization."""
        attributes = []
        if self.organization:
            attributes.append(x509.NameAttribute(oid.NameOID.ORGANIZATION_NAME, self.organization))
        attributes.append(x509.NameAttribute(oid.NameOID.COMMON_NAME, self.common_name))
        return x509.Name(attributes)


@dataclass
class WriterConfig:
    """Options for constructing a record-backed certificate writer.

    ``store`` and ``identifier`` are required. ``generator`` defaults to a
    SelfSignedCertGenerator and ``dry_run_sink`` to standard output.
    """

    store: "RecordStore | None" = None
    identifier: RecordIdentifier | None = None
    generator: "CertGenerator | None" = None
    dry_run_sink: TextIO | None = None

    def set_defaults(self) -> None:
        """Fill in the generator and dry-run sink when unset."""
        from .generator import SelfSignedCertGenerator

        if self.generator is None:
            self.generator = SelfSignedCertGenerator()
        if self.dry_run_sink is None:
            self.dry_run_sink = sys.stdout

    def validate(self) -> None:
        """Check required fields.

        Raises:
            ConfigurationError: If store or identifier is not set
        """
        if self.store is None:
            raise ConfigurationError("store must be set in WriterConfig")
        if self.identifier is None:
            raise ConfigurationError("identifier must be set in WriterConfig")
