"""SSM Parameter Store backend for certificate records."""

import json
import logging

import boto3
from botocore.exceptions import ClientError
from mypy_boto3_ssm import SSMClient as SSMClientType

from .errors import RecordAlreadyExistsError, RecordNotFoundError
from .models import Record, RecordIdentifier

logger = logging.getLogger(__name__)

# A full bundle exceeds the 4 KB Standard tier limit
DEFAULT_TIER = "Intelligent-Tiering"


class SSMRecordStore:
    """RecordStore keeping each record as one SecureString parameter.

    The parameter lives at ``{path_prefix}/{namespace}/{name}`` and holds a
    JSON document with the identifier and the PEM field mapping as text.
    """

    def __init__(
        self,
        region: str = "eu-west-2",
        path_prefix: str = "",
        tier: str = DEFAULT_TIER,
        kms_key_id: str | None = None,
    ) -> None:
        """Initialize SSM record store.

        Args:
            region: AWS region for SSM client
            path_prefix: Parameter path prefix (e.g., '/webhooks')
            tier: SSM parameter tier used on writes
            kms_key_id: Optional KMS key for SecureString encryption
        """
        self.client: SSMClientType = boto3.client("ssm", region_name=region)
        self.path_prefix = path_prefix.rstrip("/")
        self.tier = tier
        self.kms_key_id = kms_key_id

    def parameter_name(self, identifier: RecordIdentifier) -> str:
        """Return the SSM parameter path for a record identifier."""
        return f"{self.path_prefix}/{identifier.namespace}/{identifier.name}"

    def get(self, identifier: RecordIdentifier) -> Record:
        """Fetch and decode a record.

        Raises:
            RecordNotFoundError: If the parameter does not exist
            ValueError: If the parameter value is not a record document
        """
        name = self.parameter_name(identifier)
        try:
            response = self.client.get_parameter(Name=name, WithDecryption=True)
        except ClientError as e:
            error_code = e.response.get("Error", {}).get("Code", "")
            if error_code == "ParameterNotFound":
                raise RecordNotFoundError(f"record not found in SSM: {name}") from e
            raise

        return _decode_record(identifier, response["Parameter"]["Value"])

    def create(self, record: Record) -> None:
        """Store a new record, refusing to replace an existing one.

        Raises:
            RecordAlreadyExistsError: If the parameter already exists
        """
        name = self.parameter_name(record.identifier)
        try:
            self._put(name, record, overwrite=False)
        except ClientError as e:
            error_code = e.response.get("Error", {}).get("Code", "")
            if error_code == "ParameterAlreadyExists":
                raise RecordAlreadyExistsError(f"record already exists in SSM: {name}") from e
            raise
        logger.info("Created SSM parameter %s", name)

    def update(self, record: Record) -> None:
        """Replace a record unconditionally (last writer wins)."""
        name = self.parameter_name(record.identifier)
        self._put(name, record, overwrite=True)
        logger.info("Updated SSM parameter %s", name)

    def _put(self, name: str, record: Record, overwrite: bool) -> None:
        kwargs = {
            "Name": name,
            "Value": _encode_record(record),
            "Type": "SecureString",
            "Overwrite": overwrite,
            "Tier": self.tier,
        }
        if self.kms_key_id:
            kwargs["KeyId"] = self.kms_key_id
        self.client.put_parameter(**kwargs)


def _encode_record(record: Record) -> str:
    """Serialize a record to the parameter value.

    Field values are PEM text and are stored as-is, which keeps a
    4096-bit bundle within the 8 KB parameter limit.

    Raises:
        ValueError: If a field value is not ASCII text
    """
    data = None
    if record.data is not None:
        data = {field: value.decode("ascii") for field, value in record.data.items()}
    return json.dumps(
        {
            "namespace": record.identifier.namespace,
            "name": record.identifier.name,
            "data": data,
        },
        sort_keys=True,
    )


def _decode_record(identifier: RecordIdentifier, value: str) -> Record:
    try:
        document = json.loads(value)
    except json.JSONDecodeError as e:
        raise ValueError(f"SSM parameter for {identifier} is not valid JSON") from e

    if not isinstance(document, dict):
        raise ValueError(f"SSM parameter for {identifier} is not a record document")
    data = document.get("data")
    if data is None:
        return Record(identifier=identifier, data=None)
    if not isinstance(data, dict) or not all(isinstance(v, str) for v in data.values()):
        raise ValueError(f"SSM parameter for {identifier} has malformed data")

    return Record(
        identifier=identifier,
        data={field: text.encode("ascii") for field, text in data.items()},
    )
