"""Test fixtures for cert_writer tests."""

import io

import pytest
from cryptography import x509
from cryptography.hazmat.primitives.asymmetric.rsa import RSAPrivateKey

from cert_writer.lib.cert_utils import generate_private_key
from cert_writer.lib.certificate_builder import CertificateBuilder
from cert_writer.lib.config import DistinguishedName, GeneratorConfig
from cert_writer.lib.models import ArtifactBundle, RecordIdentifier
from cert_writer.lib.record_store import InMemoryRecordStore
from cert_writer.lib.record_writer import RecordCertWriter


class StaticGenerator:
    """Generator returning queued bundles and recording requested DNS names."""

    def __init__(self, *bundles: ArtifactBundle) -> None:
        self.bundles = list(bundles)
        self.calls: list[str] = []

    def generate(self, dns_name: str) -> ArtifactBundle:
        self.calls.append(dns_name)
        if len(self.bundles) > 1:
            return self.bundles.pop(0)
        return self.bundles[0]


@pytest.fixture
def identifier() -> RecordIdentifier:
    """Return the record identifier used across writer tests."""
    return RecordIdentifier(namespace="ns", name="webhook-cert")


@pytest.fixture
def bundle() -> ArtifactBundle:
    """Return a deterministic bundle."""
    return ArtifactBundle(ca_cert=b"CA", cert=b"CERT", key=b"KEY")


@pytest.fixture
def second_bundle() -> ArtifactBundle:
    """Return a different deterministic bundle for overwrite tests."""
    return ArtifactBundle(ca_cert=b"CA2", cert=b"CERT2", key=b"KEY2")


@pytest.fixture
def static_generator(bundle: ArtifactBundle, second_bundle: ArtifactBundle) -> StaticGenerator:
    """Return a generator yielding ``bundle`` first, then ``second_bundle``."""
    return StaticGenerator(bundle, second_bundle)


@pytest.fixture
def store() -> InMemoryRecordStore:
    """Return an empty in-memory record store."""
    return InMemoryRecordStore()


@pytest.fixture
def sink() -> io.StringIO:
    """Return an in-memory dry-run sink."""
    return io.StringIO()


@pytest.fixture
def writer(
    store: InMemoryRecordStore,
    static_generator: StaticGenerator,
    identifier: RecordIdentifier,
    sink: io.StringIO,
) -> RecordCertWriter:
    """Return a writer over the in-memory store and static generator."""
    return RecordCertWriter(
        store=store,
        generator=static_generator,
        identifier=identifier,
        dry_run_sink=sink,
    )


@pytest.fixture
def generator_config() -> GeneratorConfig:
    """Return generator configuration with small keys for speed."""
    return GeneratorConfig(
        ca_common_name="Test CA",
        organization="Test Org",
        ca_validity_years=1,
        cert_validity_days=30,
        key_size=2048,  # Faster for tests
    )


@pytest.fixture
def ca_key() -> RSAPrivateKey:
    """Generate RSA private key for the CA."""
    return generate_private_key(key_size=2048)


@pytest.fixture
def ca_cert(ca_key: RSAPrivateKey) -> x509.Certificate:
    """Generate self-signed CA certificate."""
    return CertificateBuilder.build_ca(
        subject_dn=DistinguishedName(common_name="Test CA", organization="Test Org"),
        private_key=ca_key,
        validity_years=1,
    )
