"""API client factory for the Argo Server."""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Optional

from argo_cli.core.exceptions import ClientError
from argo_cli.core.settings import TOKEN_PREFIXES, ClientSettings

from .archive import ArchivedWorkflowServiceClient
from .info import InfoServiceClient
from .resources import (
    ClusterWorkflowTemplateServiceClient,
    CronWorkflowServiceClient,
    WorkflowTemplateServiceClient,
)
from .transport import ClientMode, HTTPTransport, resolve_client_mode, server_url
from .workflow import WorkflowServiceClient

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RequestContext:
    """Per-request metadata: headers sent with every call and the request timeout."""

    headers: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    timeout: Optional[float] = None

    def with_headers(self, headers: Mapping[str, str]) -> "RequestContext":
        return replace(self, headers=MappingProxyType({**self.headers, **headers}))


def parse_header(raw: str) -> tuple[str, str]:
    """Split a ``Key: Value`` header flag."""
    key, sep, value = raw.partition(":")
    if not sep or not key.strip():
        raise ClientError(f'invalid header {raw!r}: expected "Key: Value"')
    return key.strip(), value.strip()


class APIClient:
    """Entry point to the Argo Server's service clients.

    Use as a context manager, or call ``close()``, to release the
    underlying HTTP session.
    """

    def __init__(self, transport: HTTPTransport, mode: ClientMode, instance_id: Optional[str] = None):
        self.transport = transport
        self.mode = mode
        self.instance_id = instance_id

    def new_info_service_client(self) -> InfoServiceClient:
        return InfoServiceClient(self.transport)

    def new_workflow_service_client(self) -> WorkflowServiceClient:
        return WorkflowServiceClient(self.transport, instance_id=self.instance_id)

    def new_archived_workflow_service_client(self) -> ArchivedWorkflowServiceClient:
        return ArchivedWorkflowServiceClient(self.transport)

    def new_workflow_template_service_client(self) -> WorkflowTemplateServiceClient:
        return WorkflowTemplateServiceClient(self.transport)

    def new_cluster_workflow_template_service_client(self) -> ClusterWorkflowTemplateServiceClient:
        return ClusterWorkflowTemplateServiceClient(self.transport)

    def new_cron_workflow_service_client(self) -> CronWorkflowServiceClient:
        return CronWorkflowServiceClient(self.transport)

    def close(self) -> None:
        self.transport.close()

    def __enter__(self) -> "APIClient":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()


def new_api_client(
    settings: ClientSettings, ctx: Optional[RequestContext] = None
) -> tuple[RequestContext, APIClient]:
    """Create an API client for the configured mode.

    Args:
        settings: Resolved client settings
        ctx: Base request context; its headers are kept and auth is added

    Returns:
        The request context to use for calls, carrying auth headers, and the client

    Raises:
        ClientError: If the configuration cannot produce a client
    """
    mode = resolve_client_mode(settings)
    if mode is ClientMode.KUBERNETES:
        raise ClientError(
            "Kubernetes API mode is not supported by this client; set ARGO_SERVER to use the Argo Server"
        )
    if mode is ClientMode.GRPC:
        # The Argo Server serves its JSON gateway on the same port as gRPC.
        logger.debug("Using the Argo Server HTTP/1 gateway for gRPC mode", extra={"mode": mode.value})

    headers: dict[str, str] = {}
    for raw in settings.headers:
        key, value = parse_header(raw)
        headers[key] = value
    if settings.token:
        if not settings.token.startswith(TOKEN_PREFIXES):
            raise ClientError('ARGO_TOKEN must start with "Bearer " or "Basic "')
        headers["Authorization"] = settings.token

    base = ctx or RequestContext()
    if base.timeout is None:
        base = replace(base, timeout=settings.request_timeout)

    transport = HTTPTransport(server_url(settings), verify=not settings.insecure_skip_verify)
    return base.with_headers(headers), APIClient(transport, mode, instance_id=settings.instance_id)
