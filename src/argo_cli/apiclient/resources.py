"""Service clients for workflow templates, cluster workflow templates and cron workflows.

The three resources share one REST shape: list/get/create/delete under a
collection path, with the object wrapped under a resource-specific key on
create.
"""

from typing import TYPE_CHECKING, Any, ClassVar, Optional

from .transport import HTTPTransport

if TYPE_CHECKING:
    from .client import RequestContext


class ResourceServiceClient:
    collection: ClassVar[str]
    body_key: ClassVar[str]
    namespaced: ClassVar[bool] = True

    def __init__(self, transport: HTTPTransport):
        self.transport = transport

    def _path(self, namespace: Optional[str], name: Optional[str] = None) -> str:
        path = f"api/v1/{self.collection}"
        if self.namespaced:
            path = f"{path}/{namespace}"
        if name:
            path = f"{path}/{name}"
        return path

    def _create_body(self, namespace: Optional[str], obj: dict[str, Any]) -> dict[str, Any]:
        body: dict[str, Any] = {self.body_key: obj}
        if self.namespaced:
            body["namespace"] = namespace
        return body

    def list_all(self, ctx: "RequestContext", namespace: Optional[str] = None) -> list[dict[str, Any]]:
        data = self.transport.request(ctx, "GET", self._path(namespace))
        return data.get("items") or []

    def get(self, ctx: "RequestContext", name: str, namespace: Optional[str] = None) -> dict[str, Any]:
        return self.transport.request(ctx, "GET", self._path(namespace, name))

    def create(self, ctx: "RequestContext", obj: dict[str, Any], namespace: Optional[str] = None) -> dict[str, Any]:
        return self.transport.request(ctx, "POST", self._path(namespace), body=self._create_body(namespace, obj))

    def delete(self, ctx: "RequestContext", name: str, namespace: Optional[str] = None) -> None:
        self.transport.request(ctx, "DELETE", self._path(namespace, name))


class WorkflowTemplateServiceClient(ResourceServiceClient):
    collection = "workflow-templates"
    body_key = "template"


class ClusterWorkflowTemplateServiceClient(ResourceServiceClient):
    collection = "cluster-workflow-templates"
    body_key = "template"
    namespaced = False


class CronWorkflowServiceClient(ResourceServiceClient):
    collection = "cron-workflows"
    body_key = "cronWorkflow"

    def suspend(self, ctx: "RequestContext", name: str, namespace: str) -> dict[str, Any]:
        body = {"name": name, "namespace": namespace}
        return self.transport.request(ctx, "PUT", f"{self._path(namespace, name)}/suspend", body=body)

    def resume(self, ctx: "RequestContext", name: str, namespace: str) -> dict[str, Any]:
        body = {"name": name, "namespace": namespace}
        return self.transport.request(ctx, "PUT", f"{self._path(namespace, name)}/resume", body=body)
