"""Exception hierarchy for certificate writing."""


class CertWriterError(Exception):
    """Base exception for certificate writer errors."""


class ConfigurationError(CertWriterError):
    """Required writer configuration is missing or invalid."""


class NotFoundError(CertWriterError):
    """No certificate record exists; the caller should create one."""


class AlreadyExistsError(CertWriterError):
    """A concurrent writer created the record first; the caller should re-read it."""


class GenerationError(CertWriterError):
    """Certificate generation failed."""


class RecordNotFoundError(CertWriterError):
    """Raised by a record store when the requested record does not exist."""


class RecordAlreadyExistsError(CertWriterError):
    """Raised by a record store when creating a record that already exists."""
