"""Best-effort version compatibility check between the CLI and the Argo Server.

The check runs before every command. It can only ever warn: every failure is
turned into a log line and the command carries on.
"""

import logging
import os
from collections.abc import Mapping
from enum import Enum
from typing import TYPE_CHECKING, Callable, Optional

from argo_cli.apiclient.info import GetVersionRequest
from argo_cli.core.exceptions import ArgoError
from argo_cli.core.settings import ARGO_SERVER
from argo_cli.core.version import get_version

if TYPE_CHECKING:
    from argo_cli.apiclient.client import APIClient, RequestContext

logger = logging.getLogger(__name__)

ClientFactory = Callable[[], tuple["RequestContext", "APIClient"]]


class CompatibilityOutcome(str, Enum):
    """Result of a compatibility check; none of the outcomes stops the command."""

    SKIPPED = "skipped"
    CHECK_FAILED = "check-failed"
    MATCH = "match"
    MISMATCH = "mismatch"


def check_version_compatibility(
    client_factory: ClientFactory,
    local_version: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> CompatibilityOutcome:
    """Warn if the CLI version differs from the Argo Server version.

    Args:
        client_factory: Returns a request context and API client bound to the
            current command. Only called when ``ARGO_SERVER`` is set.
        local_version: Git tag of this client, defaults to the running build
        environ: Environment to read ``ARGO_SERVER`` from, defaults to ``os.environ``

    Returns:
        The outcome of the check; never raises for client or server failures
    """
    env = os.environ if environ is None else environ
    # Without ARGO_SERVER there is no server to compare against
    if ARGO_SERVER not in env:
        return CompatibilityOutcome.SKIPPED

    try:
        ctx, api_client = client_factory()
    except ArgoError as e:
        logger.warning(f"Failed to create service client: {e}")
        return CompatibilityOutcome.CHECK_FAILED

    with api_client:
        try:
            info = api_client.new_info_service_client()
        except ArgoError as e:
            logger.warning(f"Failed to create service client: {e}")
            return CompatibilityOutcome.CHECK_FAILED

        try:
            server_version = info.get_version(ctx, GetVersionRequest())
        except ArgoError as e:
            logger.warning(f"Failed to connect to Argo Server: {e}")
            return CompatibilityOutcome.CHECK_FAILED

    cli_version = local_version if local_version is not None else get_version().git_tag
    if server_version.git_tag != cli_version:
        logger.warning(
            f"CLI version ({cli_version}) does not match server version ({server_version.git_tag}). "
            "This can lead to unexpected behavior.",
            extra={"cli_version": cli_version, "server_version": server_version.git_tag},
        )
        return CompatibilityOutcome.MISMATCH

    logger.debug("CLI version matches server version", extra={"version": cli_version})
    return CompatibilityOutcome.MATCH
