#!/usr/bin/env python3
"""Ensure a TLS certificate bundle exists in SSM for a DNS name."""

import argparse
import os
import sys

from cert_writer.lib.config import GeneratorConfig, WriterConfig
from cert_writer.lib.generator import SelfSignedCertGenerator
from cert_writer.lib.logging_config import LOGGER
from cert_writer.lib.models import RecordIdentifier
from cert_writer.lib.record_writer import new_record_cert_writer
from cert_writer.lib.ssm_client import SSMRecordStore

DEFAULT_REGION = "eu-west-2"


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser shared by main() and tests."""
    parser = argparse.ArgumentParser(
        description="Create or refresh a certificate bundle record (or render it with --dry-run)"
    )
    parser.add_argument("--namespace", required=True, help="Record namespace")
    parser.add_argument("--name", required=True, help="Record name")
    parser.add_argument(
        "--dns-name",
        required=True,
        help="DNS name the serving certificate is issued for",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the record as YAML instead of writing it to SSM",
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
    parser.add_argument(
        "--key-size",
        type=int,
        default=GeneratorConfig.key_size,
        help=f"RSA key size (default: {GeneratorConfig.key_size})",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Ensure the certificate record exists.

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    args = build_parser().parse_args(argv)

    try:
        identifier = RecordIdentifier(namespace=args.namespace, name=args.name)
        writer = new_record_cert_writer(
            WriterConfig(
                store=SSMRecordStore(region=args.region, path_prefix=args.path_prefix),
                identifier=identifier,
                generator=SelfSignedCertGenerator(GeneratorConfig(key_size=args.key_size)),
            )
        )

        if args.dry_run:
            LOGGER.info("DRY RUN - no SSM changes will be made")

        LOGGER.info("Ensuring certificate for %s in %s", args.dns_name, identifier)
        _, changed = writer.ensure_cert(args.dns_name, dry_run=args.dry_run)

        if changed:
            LOGGER.info("Certificate record %s provisioned", identifier)
        else:
            LOGGER.info("Certificate record %s already up to date", identifier)
        return 0

    except Exception as e:
        LOGGER.error("Certificate provisioning failed: %s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
