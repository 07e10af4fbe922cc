"""Workflow template commands."""

from .resource import resource_group

template = resource_group(
    name="template",
    help_text="Manipulate workflow templates.",
    kind="WorkflowTemplate",
    plural="workflow templates",
    service_factory=lambda api_client: api_client.new_workflow_template_service_client(),
)
