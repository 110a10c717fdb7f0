"""Data models for certificate bundles and the records that hold them."""

import base64
from dataclasses import dataclass

CA_CERT_NAME = "ca-cert.pem"
SERVER_CERT_NAME = "cert.pem"
SERVER_KEY_NAME = "key.pem"

RECORD_FIELD_NAMES = (CA_CERT_NAME, SERVER_CERT_NAME, SERVER_KEY_NAME)


@dataclass(frozen=True)
class ArtifactBundle:
    """CA certificate, serving certificate and serving private key, all PEM bytes."""

    ca_cert: bytes
    cert: bytes
    key: bytes


@dataclass(frozen=True)
class RecordIdentifier:
    """Namespace + name address of a record in a store."""

    namespace: str
    name: str

    def __str__(self) -> str:
        return f"{self.namespace}/{self.name}"


@dataclass(frozen=True)
class ProvisionRequest:
    """Per-call parameters for a single provisioning pass.

    Passed explicitly to read/write/overwrite so that a single writer can
    serve concurrent callers without sharing mutable state.
    """

    dns_name: str
    dry_run: bool = False


@dataclass
class Record:
    """Backend entity holding certificate material under well-known field names.

    ``data`` is None when the stored record carries no field mapping at all,
    which is distinct from a mapping whose fields are empty.
    """

    identifier: RecordIdentifier
    data: dict[str, bytes] | None = None

    def encoded_data(self) -> dict[str, str] | None:
        """Return the field mapping with values base64-encoded as text."""
        if self.data is None:
            return None
        return {
            field: base64.b64encode(value).decode("ascii")
            for field, value in self.data.items()
        }
