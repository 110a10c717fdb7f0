"""Record store capability and an in-memory implementation."""

import logging
from typing import Protocol

from .errors import RecordAlreadyExistsError, RecordNotFoundError
from .models import Record, RecordIdentifier

logger = logging.getLogger(__name__)


class RecordStore(Protocol):
    """Key/value store of certificate records addressed by namespace + name.

    Implementations raise RecordNotFoundError from ``get`` when the record is
    absent and RecordAlreadyExistsError from ``create`` when it is present.
    Any other backend error propagates unchanged.
    """

    def get(self, identifier: RecordIdentifier) -> Record: ...

    def create(self, record: Record) -> None: ...

    def update(self, record: Record) -> None: ...


def _copy(record: Record) -> Record:
    data = None if record.data is None else dict(record.data)
    return Record(identifier=record.identifier, data=data)


class InMemoryRecordStore:
    """Dict-backed RecordStore; records are copied in and out."""

    def __init__(self, records: list[Record] | None = None) -> None:
        self._records: dict[RecordIdentifier, Record] = {}
        for record in records or []:
            self._records[record.identifier] = _copy(record)

    def get(self, identifier: RecordIdentifier) -> Record:
        try:
            return _copy(self._records[identifier])
        except KeyError:
            raise RecordNotFoundError(f"record {identifier} not found") from None

    def create(self, record: Record) -> None:
        if record.identifier in self._records:
            raise RecordAlreadyExistsError(f"record {record.identifier} already exists")
        self._records[record.identifier] = _copy(record)
        logger.debug("Created record %s", record.identifier)

    def update(self, record: Record) -> None:
        if record.identifier not in self._records:
            raise RecordNotFoundError(f"record {record.identifier} not found")
        self._records[record.identifier] = _copy(record)
        logger.debug("Updated record %s", record.identifier)
