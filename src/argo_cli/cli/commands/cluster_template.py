"""Cluster workflow template commands."""

from .resource import resource_group

cluster_template = resource_group(
    name="cluster-template",
    help_text="Manipulate cluster workflow templates.",
    kind="ClusterWorkflowTemplate",
    plural="cluster workflow templates",
    service_factory=lambda api_client: api_client.new_cluster_workflow_template_service_client(),
    namespaced=False,
)
