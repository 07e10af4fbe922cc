"""Workflow service: CRUD, lifecycle actions and logs for workflows."""

from collections.abc import Iterator
from typing import TYPE_CHECKING, Any, Optional

from .transport import HTTPTransport

if TYPE_CHECKING:
    from .client import RequestContext

INSTANCE_ID_LABEL = "workflows.argoproj.io/controller-instanceid"
PHASE_LABEL = "workflows.argoproj.io/phase"


def label_selector(selector: Optional[str], instance_id: Optional[str]) -> Optional[str]:
    """Combine a user selector with the controller instance id requirement."""
    parts = [selector] if selector else []
    if instance_id:
        parts.append(f"{INSTANCE_ID_LABEL}={instance_id}")
    return ",".join(parts) or None


class WorkflowServiceClient:
    """Calls under ``/api/v1/workflows``."""

    def __init__(self, transport: HTTPTransport, instance_id: Optional[str] = None):
        self.transport = transport
        self.instance_id = instance_id

    @staticmethod
    def _path(namespace: str, name: Optional[str] = None, action: Optional[str] = None) -> str:
        path = f"api/v1/workflows/{namespace}"
        if name:
            path = f"{path}/{name}"
        if action:
            path = f"{path}/{action}"
        return path

    def list_workflows(
        self, ctx: "RequestContext", namespace: str, selector: Optional[str] = None
    ) -> list[dict[str, Any]]:
        params = {}
        labels = label_selector(selector, self.instance_id)
        if labels:
            params["listOptions.labelSelector"] = labels
        data = self.transport.request(ctx, "GET", self._path(namespace), params=params)
        return data.get("items") or []

    def get_workflow(self, ctx: "RequestContext", namespace: str, name: str) -> dict[str, Any]:
        return self.transport.request(ctx, "GET", self._path(namespace, name))

    def create_workflow(
        self, ctx: "RequestContext", namespace: str, workflow: dict[str, Any], server_dry_run: bool = False
    ) -> dict[str, Any]:
        body = {"namespace": namespace, "workflow": workflow, "serverDryRun": server_dry_run}
        return self.transport.request(ctx, "POST", self._path(namespace), body=body)

    def submit_workflow(
        self,
        ctx: "RequestContext",
        namespace: str,
        resource_kind: str,
        resource_name: str,
        submit_options: Optional[dict[str, Any]] = None,
    ) -> dict[str, Any]:
        """Create a workflow from a workflow template, cluster template or cron workflow."""
        body = {
            "namespace": namespace,
            "resourceKind": resource_kind,
            "resourceName": resource_name,
            "submitOptions": submit_options or {},
        }
        return self.transport.request(ctx, "POST", self._path(namespace, "submit"), body=body)

    def delete_workflow(self, ctx: "RequestContext", namespace: str, name: str) -> None:
        self.transport.request(ctx, "DELETE", self._path(namespace, name))

    def _action(self, ctx: "RequestContext", namespace: str, name: str, action: str, **fields: Any) -> dict[str, Any]:
        body = {"name": name, "namespace": namespace}
        body.update({key: value for key, value in fields.items() if value is not None})
        return self.transport.request(ctx, "PUT", self._path(namespace, name, action), body=body)

    def resubmit_workflow(
        self, ctx: "RequestContext", namespace: str, name: str, memoized: bool = False
    ) -> dict[str, Any]:
        return self._action(ctx, namespace, name, "resubmit", memoized=memoized)

    def resume_workflow(
        self, ctx: "RequestContext", namespace: str, name: str, node_field_selector: Optional[str] = None
    ) -> dict[str, Any]:
        return self._action(ctx, namespace, name, "resume", nodeFieldSelector=node_field_selector)

    def retry_workflow(
        self,
        ctx: "RequestContext",
        namespace: str,
        name: str,
        restart_successful: bool = False,
        node_field_selector: Optional[str] = None,
    ) -> dict[str, Any]:
        return self._action(
            ctx,
            namespace,
            name,
            "retry",
            restartSuccessful=restart_successful,
            nodeFieldSelector=node_field_selector,
        )

    def stop_workflow(
        self,
        ctx: "RequestContext",
        namespace: str,
        name: str,
        node_field_selector: Optional[str] = None,
        message: Optional[str] = None,
    ) -> dict[str, Any]:
        return self._action(ctx, namespace, name, "stop", nodeFieldSelector=node_field_selector, message=message)

    def suspend_workflow(self, ctx: "RequestContext", namespace: str, name: str) -> dict[str, Any]:
        return self._action(ctx, namespace, name, "suspend")

    def terminate_workflow(self, ctx: "RequestContext", namespace: str, name: str) -> dict[str, Any]:
        return self._action(ctx, namespace, name, "terminate")

    def workflow_logs(
        self,
        ctx: "RequestContext",
        namespace: str,
        name: str,
        pod_name: Optional[str] = None,
        container: str = "main",
        follow: bool = False,
        grep: Optional[str] = None,
    ) -> Iterator[dict[str, Any]]:
        """Stream log entries, each with ``podName`` and ``content``."""
        params: dict[str, Any] = {"logOptions.container": container}
        if pod_name:
            params["podName"] = pod_name
        if follow:
            params["logOptions.follow"] = "true"
        if grep:
            params["grep"] = grep
        return self.transport.stream(ctx, self._path(namespace, name, "log"), params=params, follow=follow)
