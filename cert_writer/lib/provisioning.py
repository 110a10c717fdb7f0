"""Certificate writer interfaces and the shared create-or-refresh policy."""

import logging
from collections.abc import Callable
from typing import Any, Protocol

from .errors import AlreadyExistsError, ConfigurationError, NotFoundError
from .models import ArtifactBundle, ProvisionRequest

logger = logging.getLogger(__name__)

BundleValidator = Callable[[ArtifactBundle | None, str], bool]


class CertReadWriter(Protocol):
    """Storage-specific read/write/overwrite actions used by the policy."""

    def read(self, request: ProvisionRequest) -> ArtifactBundle | None: ...

    def write(self, request: ProvisionRequest) -> ArtifactBundle: ...

    def overwrite(self, request: ProvisionRequest) -> ArtifactBundle: ...


class CertWriter(Protocol):
    """Provisions certificates for a DNS name into some backend."""

    def ensure_cert(
        self, dns_name: str, dry_run: bool = False
    ) -> tuple[ArtifactBundle, bool]: ...

    def inject(self, *owners: Any) -> None: ...


def bundle_is_complete(bundle: ArtifactBundle | None, dns_name: str) -> bool:
    """Default validator: the bundle exists and none of its fields are empty.

    Expiry and hostname checks are left to callers that pass their own validator.
    """
    if bundle is None:
        return False
    return bool(bundle.ca_cert and bundle.cert and bundle.key)


def create_if_not_exists(
    rw: CertReadWriter, request: ProvisionRequest
) -> tuple[ArtifactBundle | None, bool]:
    """Read the bundle, creating it when absent.

    Returns:
        Tuple of (bundle, changed). ``changed`` is True when a write was attempted.
    """
    try:
        return rw.read(request), False
    except NotFoundError:
        pass

    try:
        return rw.write(request), True
    except AlreadyExistsError:
        # Lost a race with another writer; use what it stored
        logger.info("Certificate record created concurrently, re-reading")
        return rw.read(request), True


def handle_common(
    request: ProvisionRequest,
    rw: CertReadWriter,
    validator: BundleValidator = bundle_is_complete,
) -> tuple[ArtifactBundle, bool]:
    """Ensure a valid bundle exists for ``request.dns_name``.

    Creates the bundle if missing and regenerates it if ``validator`` rejects it.

    Returns:
        Tuple of (bundle, changed)

    Raises:
        ConfigurationError: If dns_name is empty
    """
    if not request.dns_name:
        raise ConfigurationError("dns_name should not be empty")

    bundle, changed = create_if_not_exists(rw, request)

    if not validator(bundle, request.dns_name):
        logger.info("Certificate for %s is invalid or incomplete, regenerating", request.dns_name)
        bundle = rw.overwrite(request)
        changed = True

    if bundle is None:
        raise NotFoundError(f"no certificate bundle available for {request.dns_name}")
    return bundle, changed
