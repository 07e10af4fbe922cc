"""Archived workflow service."""

from typing import TYPE_CHECKING, Any, Optional

from .transport import HTTPTransport

if TYPE_CHECKING:
    from .client import RequestContext


class ArchivedWorkflowServiceClient:
    """Calls under ``/api/v1/archived-workflows``; archived workflows are addressed by UID."""

    def __init__(self, transport: HTTPTransport):
        self.transport = transport

    def list_archived_workflows(
        self, ctx: "RequestContext", namespace: Optional[str] = None, selector: Optional[str] = None
    ) -> list[dict[str, Any]]:
        params = {}
        if namespace:
            params["namespace"] = namespace
        if selector:
            params["listOptions.labelSelector"] = selector
        data = self.transport.request(ctx, "GET", "api/v1/archived-workflows", params=params)
        return data.get("items") or []

    def get_archived_workflow(self, ctx: "RequestContext", uid: str) -> dict[str, Any]:
        return self.transport.request(ctx, "GET", f"api/v1/archived-workflows/{uid}")

    def delete_archived_workflow(self, ctx: "RequestContext", uid: str) -> None:
        self.transport.request(ctx, "DELETE", f"api/v1/archived-workflows/{uid}")
