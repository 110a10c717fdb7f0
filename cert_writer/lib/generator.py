"""Certificate generator capability and the self-signed implementation."""

import logging
from typing import Protocol

from cryptography import x509
from cryptography.hazmat.primitives.asymmetric.rsa import RSAPrivateKey

from .cert_utils import (
    deserialize_certificate,
    deserialize_private_key,
    generate_private_key,
    get_certificate_serial_hex,
    key_matches_certificate,
    serialize_certificate,
    serialize_private_key,
)
from .certificate_builder import CertificateBuilder
from .config import DistinguishedName, GeneratorConfig
from .errors import GenerationError
from .models import ArtifactBundle

logger = logging.getLogger(__name__)


class CertGenerator(Protocol):
    """Produces a fresh certificate bundle for a DNS name."""

    def generate(self, dns_name: str) -> ArtifactBundle: ...


class SelfSignedCertGenerator:
    """Generates serving certificates signed by a self-signed CA.

    A new CA is minted on every call unless one has been configured with
    ``set_ca``, in which case that CA signs the serving certificate.
    """

    def __init__(self, config: GeneratorConfig | None = None) -> None:
        self.config = config or GeneratorConfig()
        self._ca_key_pem: bytes | None = None
        self._ca_cert_pem: bytes | None = None

    def set_ca(self, ca_key_pem: bytes, ca_cert_pem: bytes) -> None:
        """Use an existing CA key pair (PEM) to sign serving certificates."""
        self._ca_key_pem = ca_key_pem
        self._ca_cert_pem = ca_cert_pem

    def generate(self, dns_name: str) -> ArtifactBundle:
        """Generate CA certificate, serving certificate and serving key for ``dns_name``.

        Raises:
            GenerationError: If dns_name is empty, the configured CA is
                unusable, or certificate construction fails
        """
        if not dns_name:
            raise GenerationError("dns_name must not be empty")

        try:
            ca_key, ca_cert = self._load_or_create_ca()

            key = generate_private_key(self.config.key_size)
            cert = CertificateBuilder.build_serving_certificate(
                dns_name=dns_name,
                public_key=key.public_key(),
                issuer_cert=ca_cert,
                issuer_key=ca_key,
                validity_days=self.config.cert_validity_days,
                organization=self.config.organization,
            )
        except ValueError as e:
            raise GenerationError(f"failed to generate certificate for {dns_name}: {e}") from e

        logger.info(
            "Generated certificate for %s (serial %s)",
            dns_name,
            get_certificate_serial_hex(cert),
        )
        return ArtifactBundle(
            ca_cert=serialize_certificate(ca_cert),
            cert=serialize_certificate(cert),
            key=serialize_private_key(key),
        )

    def _load_or_create_ca(self) -> tuple[RSAPrivateKey, x509.Certificate]:
        if self._ca_key_pem is not None and self._ca_cert_pem is not None:
            ca_key = deserialize_private_key(self._ca_key_pem)
            ca_cert = deserialize_certificate(self._ca_cert_pem)
            if not key_matches_certificate(ca_key, ca_cert):
                raise GenerationError("configured CA key does not match CA certificate")
            return ca_key, ca_cert

        ca_key = generate_private_key(self.config.key_size)
        ca_dn = DistinguishedName(
            common_name=self.config.ca_common_name,
            organization=self.config.organization,
        )
        ca_cert = CertificateBuilder.build_ca(
            subject_dn=ca_dn,
            private_key=ca_key,
            validity_years=self.config.ca_validity_years,
        )
        logger.debug("Created self-signed CA %s", self.config.ca_common_name)
        return ca_key, ca_cert
