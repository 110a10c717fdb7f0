"""Tests for ensure_cert and export_cert scripts."""

import stat
from collections.abc import Generator
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
import yaml

from cert_writer.lib.errors import RecordNotFoundError
from cert_writer.lib.models import (
    CA_CERT_NAME,
    SERVER_CERT_NAME,
    SERVER_KEY_NAME,
    ArtifactBundle,
    Record,
    RecordIdentifier,
)
from cert_writer.lib.record_store import InMemoryRecordStore
from cert_writer.scripts import ensure_cert, export_cert

BASE_ARGS = ["--namespace", "ns", "--name", "webhook-cert"]


@pytest.fixture
def memory_store() -> InMemoryRecordStore:
    return InMemoryRecordStore()


class TestEnsureCert:
    """Tests for ensure_cert.main."""

    @pytest.fixture
    def mock_store_cls(self, memory_store: InMemoryRecordStore) -> Generator[MagicMock]:
        with patch("cert_writer.scripts.ensure_cert.SSMRecordStore") as mock:
            mock.return_value = memory_store
            yield mock

    def test_creates_record(
        self,
        mock_store_cls: MagicMock,
        memory_store: InMemoryRecordStore,
        identifier: RecordIdentifier,
    ) -> None:
        """Should create the record and exit 0."""
        exit_code = ensure_cert.main(BASE_ARGS + ["--dns-name", "svc.ns.svc"])

        assert exit_code == 0
        record = memory_store.get(identifier)
        assert record.data is not None
        assert set(record.data) == {CA_CERT_NAME, SERVER_CERT_NAME, SERVER_KEY_NAME}

    def test_passes_region_and_prefix(self, mock_store_cls: MagicMock) -> None:
        """Should build the SSM store from CLI flags."""
        ensure_cert.main(
            BASE_ARGS
            + ["--dns-name", "svc.ns.svc", "--region", "us-east-1", "--path-prefix", "/webhooks"]
        )

        mock_store_cls.assert_called_once_with(region="us-east-1", path_prefix="/webhooks")

    def test_dry_run_prints_yaml(
        self,
        mock_store_cls: MagicMock,
        memory_store: InMemoryRecordStore,
        identifier: RecordIdentifier,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        """Dry-run prints the record and leaves the store empty."""
        exit_code = ensure_cert.main(BASE_ARGS + ["--dns-name", "svc.ns.svc", "--dry-run"])

        assert exit_code == 0
        document = yaml.safe_load(capsys.readouterr().out)
        assert document["metadata"] == {"name": "webhook-cert", "namespace": "ns"}
        with pytest.raises(RecordNotFoundError):
            memory_store.get(identifier)

    def test_failure_returns_1(self, mock_store_cls: MagicMock) -> None:
        """Backend failures exit 1."""
        mock_store_cls.return_value = MagicMock()
        mock_store_cls.return_value.get.side_effect = RuntimeError("boom")

        assert ensure_cert.main(BASE_ARGS + ["--dns-name", "svc.ns.svc"]) == 1


class TestExportCert:
    """Tests for export_cert.main."""

    @pytest.fixture
    def mock_store_cls(self, memory_store: InMemoryRecordStore) -> Generator[MagicMock]:
        with patch("cert_writer.scripts.export_cert.SSMRecordStore") as mock:
            mock.return_value = memory_store
            yield mock

    def test_writes_pem_files(
        self,
        mock_store_cls: MagicMock,
        memory_store: InMemoryRecordStore,
        identifier: RecordIdentifier,
        tmp_path: Path,
    ) -> None:
        """Should write the three fields to files named after them."""
        memory_store.create(
            Record(
                identifier=identifier,
                data={CA_CERT_NAME: b"CA", SERVER_CERT_NAME: b"CERT", SERVER_KEY_NAME: b"KEY"},
            )
        )

        exit_code = export_cert.main(BASE_ARGS + ["--output-dir", str(tmp_path)])

        assert exit_code == 0
        assert (tmp_path / CA_CERT_NAME).read_bytes() == b"CA"
        assert (tmp_path / SERVER_CERT_NAME).read_bytes() == b"CERT"
        assert (tmp_path / SERVER_KEY_NAME).read_bytes() == b"KEY"

    def test_missing_record_returns_1(self, mock_store_cls: MagicMock, tmp_path: Path) -> None:
        """Absent record exits 1 and writes nothing."""
        assert export_cert.main(BASE_ARGS + ["--output-dir", str(tmp_path / "out")]) == 1
        assert not (tmp_path / "out").exists()

    def test_record_without_data_returns_1(
        self,
        mock_store_cls: MagicMock,
        memory_store: InMemoryRecordStore,
        identifier: RecordIdentifier,
        tmp_path: Path,
    ) -> None:
        """A record with no data exits 1."""
        memory_store.create(Record(identifier=identifier, data=None))

        assert export_cert.main(BASE_ARGS + ["--output-dir", str(tmp_path)]) == 1

    def test_reads_record_from_store(
        self, mock_store_cls: MagicMock, identifier: RecordIdentifier, tmp_path: Path
    ) -> None:
        """Export fetches the record by identifier and never writes to the store."""
        mock_store = MagicMock()
        mock_store.get.return_value = Record(
            identifier=identifier,
            data={CA_CERT_NAME: b"CA", SERVER_CERT_NAME: b"CERT", SERVER_KEY_NAME: b"KEY"},
        )
        mock_store_cls.return_value = mock_store

        exit_code = export_cert.main(
            BASE_ARGS + ["--output-dir", str(tmp_path), "--region", "us-east-1"]
        )

        assert exit_code == 0
        mock_store_cls.assert_called_once_with(region="us-east-1", path_prefix="")
        mock_store.get.assert_called_once_with(identifier)
        mock_store.create.assert_not_called()
        mock_store.update.assert_not_called()


def test_write_bundle_restricts_key_permissions(tmp_path: Path, bundle: ArtifactBundle) -> None:
    """Private key file is only readable by its owner."""
    paths = export_cert.write_bundle(bundle, tmp_path / "certs")

    key_mode = stat.S_IMODE(paths[2].stat().st_mode)
    assert key_mode == 0o600
    assert [p.name for p in paths] == [CA_CERT_NAME, SERVER_CERT_NAME, SERVER_KEY_NAME]
