"""YAML rendering of records for dry-run output."""

from typing import TextIO

import yaml

from .models import Record


def record_to_document(record: Record) -> dict:
    """Return the record as a plain mapping with base64 field values."""
    return {
        "metadata": {
            "name": record.identifier.name,
            "namespace": record.identifier.namespace,
        },
        "data": record.encoded_data(),
    }


def render_record(record: Record) -> str:
    """Render a record as a single YAML document with an explicit start marker."""
    return yaml.safe_dump(
        record_to_document(record),
        explicit_start=True,
        default_flow_style=False,
        sort_keys=False,
    )


def write_record(record: Record, sink: TextIO) -> None:
    """Render a record and write it to ``sink``."""
    sink.write(render_record(record))
    sink.flush()
