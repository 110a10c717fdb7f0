"""Certificate writer that provisions bundles into a record store."""

import logging
from dataclasses import replace
from typing import Any, TextIO

from .config import WriterConfig
from .errors import AlreadyExistsError, NotFoundError, RecordAlreadyExistsError, RecordNotFoundError
from .generator import CertGenerator
from .models import (
    CA_CERT_NAME,
    SERVER_CERT_NAME,
    SERVER_KEY_NAME,
    ArtifactBundle,
    ProvisionRequest,
    Record,
    RecordIdentifier,
)
from .provisioning import BundleValidator, bundle_is_complete, handle_common
from .record_store import RecordStore
from .render import write_record

logger = logging.getLogger(__name__)


def bundle_to_record(bundle: ArtifactBundle, identifier: RecordIdentifier) -> Record:
    """Map a bundle onto the three well-known record fields."""
    return Record(
        identifier=identifier,
        data={
            CA_CERT_NAME: bundle.ca_cert,
            SERVER_KEY_NAME: bundle.key,
            SERVER_CERT_NAME: bundle.cert,
        },
    )


def record_to_bundle(record: Record) -> ArtifactBundle | None:
    """Map a record back to a bundle; None when the record has no field mapping."""
    if record.data is None:
        return None
    return ArtifactBundle(
        ca_cert=record.data.get(CA_CERT_NAME, b""),
        cert=record.data.get(SERVER_CERT_NAME, b""),
        key=record.data.get(SERVER_KEY_NAME, b""),
    )


class RecordCertWriter:
    """Provisions a certificate bundle by reading and writing a single record.

    Per-call parameters travel in a ProvisionRequest; the writer itself holds
    only its construction-time configuration.
    """

    def __init__(
        self,
        store: RecordStore,
        generator: CertGenerator,
        identifier: RecordIdentifier,
        dry_run_sink: TextIO,
        validator: BundleValidator = bundle_is_complete,
    ) -> None:
        self.store = store
        self.generator = generator
        self.identifier = identifier
        self.dry_run_sink = dry_run_sink
        self.validator = validator

    def ensure_cert(self, dns_name: str, dry_run: bool = False) -> tuple[ArtifactBundle, bool]:
        """Provision certificates for ``dns_name`` into the configured record.

        In dry-run mode the record is rendered to the sink instead of stored.

        Returns:
            Tuple of (bundle, changed)
        """
        request = ProvisionRequest(dns_name=dns_name, dry_run=dry_run)
        return handle_common(request, self, self.validator)

    def read(self, request: ProvisionRequest) -> ArtifactBundle | None:
        """Fetch the stored bundle.

        Dry-run never consults the store and always reports not found.

        Raises:
            NotFoundError: If the record does not exist (or in dry-run mode)
        """
        if request.dry_run:
            raise NotFoundError(f"record {self.identifier} is not read in dry-run mode")
        try:
            record = self.store.get(self.identifier)
        except RecordNotFoundError as e:
            raise NotFoundError(f"record {self.identifier} not found") from e
        return record_to_bundle(record)

    def write(self, request: ProvisionRequest) -> ArtifactBundle:
        """Generate a bundle and create the record.

        Raises:
            AlreadyExistsError: If the record was created by someone else first
        """
        record, bundle = self._build_record(request)
        if request.dry_run:
            self._dry_run_write(record)
            return bundle
        try:
            self.store.create(record)
        except RecordAlreadyExistsError as e:
            raise AlreadyExistsError(f"record {self.identifier} already exists") from e
        logger.info("Created certificate record %s", self.identifier)
        return bundle

    def overwrite(self, request: ProvisionRequest) -> ArtifactBundle:
        """Generate a bundle and replace the record (last writer wins)."""
        record, bundle = self._build_record(request)
        if request.dry_run:
            self._dry_run_write(record)
            return bundle
        self.store.update(record)
        logger.info("Updated certificate record %s", self.identifier)
        return bundle

    def inject(self, *owners: Any) -> None:
        """Set owner references on the record.

        Not implemented: owner wiring is unsupported by this writer, so this
        accepts any owners and does nothing.
        """
        return None

    def _build_record(self, request: ProvisionRequest) -> tuple[Record, ArtifactBundle]:
        bundle = self.generator.generate(request.dns_name)
        return bundle_to_record(bundle, self.identifier), bundle

    def _dry_run_write(self, record: Record) -> None:
        logger.info("Dry run: rendering certificate record %s", self.identifier)
        write_record(record, self.dry_run_sink)


def new_record_cert_writer(
    config: WriterConfig, validator: BundleValidator = bundle_is_complete
) -> RecordCertWriter:
    """Construct a RecordCertWriter from config, applying defaults.

    Raises:
        ConfigurationError: If store or identifier is missing
    """
    config = replace(config)
    config.set_defaults()
    config.validate()
    return RecordCertWriter(
        store=config.store,
        generator=config.generator,
        identifier=config.identifier,
        dry_run_sink=config.dry_run_sink,
        validator=validator,
    )
