#!/usr/bin/env python3
"""Export a stored certificate bundle from SSM to PEM files."""

import argparse
import os
import sys
from pathlib import Path

from cert_writer.lib.errors import RecordNotFoundError
from cert_writer.lib.logging_config import LOGGER
from cert_writer.lib.models import (
    CA_CERT_NAME,
    SERVER_CERT_NAME,
    SERVER_KEY_NAME,
    ArtifactBundle,
    RecordIdentifier,
)
from cert_writer.lib.record_writer import record_to_bundle
from cert_writer.lib.ssm_client import SSMRecordStore

DEFAULT_REGION = "eu-west-2"


def write_bundle(bundle: ArtifactBundle, output_dir: Path) -> list[Path]:
    """Write bundle fields to ``output_dir`` under their record field names.

    The private key file is created with 0600 permissions.

    Returns:
        Paths written, in CA cert, cert, key order
    """
    output_dir.mkdir(parents=True, exist_ok=True)

    ca_path = output_dir / CA_CERT_NAME
    cert_path = output_dir / SERVER_CERT_NAME
    key_path = output_dir / SERVER_KEY_NAME

    ca_path.write_bytes(bundle.ca_cert)
    cert_path.write_bytes(bundle.cert)
    key_path.touch(mode=0o600, exist_ok=True)
    key_path.chmod(0o600)
    key_path.write_bytes(bundle.key)

    return [ca_path, cert_path, key_path]


def main(argv: list[str] | None = None) -> int:
    """Read the certificate record and write its PEM files.

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    parser = argparse.ArgumentParser(description="Export certificate bundle record to PEM files")
    parser.add_argument("--namespace", required=True, help="Record namespace")
    parser.add_argument("--name", required=True, help="Record name")
    parser.add_argument(
        "--output-dir",
        type=Path,
        required=True,
        help="Directory to write ca-cert.pem, cert.pem and key.pem into",
    )
    parser.add_argument(
        "--region",
        default=os.environ.get("AWS_REGION", DEFAULT_REGION),
        help=f"AWS region (default: $AWS_REGION or {DEFAULT_REGION})",
    )
    parser.add_argument(
        "--path-prefix",
        default="",
        help="SSM parameter path prefix (default: none)",
    )
    args = parser.parse_args(argv)

    identifier = RecordIdentifier(namespace=args.namespace, name=args.name)

    try:
        store = SSMRecordStore(region=args.region, path_prefix=args.path_prefix)
        bundle = record_to_bundle(store.get(identifier))
        if bundle is None:
            LOGGER.error("Certificate record %s has no data", identifier)
            return 1

        for path in write_bundle(bundle, args.output_dir):
            LOGGER.info("  Wrote: %s", path)
        return 0

    except RecordNotFoundError as e:
        LOGGER.error("Certificate record not found: %s", e)
        return 1
    except Exception as e:
        LOGGER.error("Certificate export failed: %s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
