"""Workflow commands: submit, list, get, logs, lifecycle actions and delete."""

import logging
from typing import Any, Optional

import click

from argo_cli.apiclient.client import RequestContext
from argo_cli.apiclient.workflow import PHASE_LABEL, WorkflowServiceClient
from argo_cli.cli.client import api_errors, namespace, open_client
from argo_cli.cli.command import ArgoCommand
from argo_cli.cli.output import (
    OUTPUT_FORMATS,
    name_of,
    print_object,
    print_objects,
    print_workflow,
    print_workflow_table,
    styled_text,
)
from argo_cli.core.manifests import (
    apply_submit_options,
    parse_labels,
    parse_parameters,
    read_manifests,
    submit_options,
)

logger = logging.getLogger(__name__)

COMPLETED_PHASES = ("Succeeded", "Failed", "Error")

SUBMIT_KINDS = {
    "workflowtemplate": "WorkflowTemplate",
    "clusterworkflowtemplate": "ClusterWorkflowTemplate",
    "cronworkflow": "CronWorkflow",
}

single_output = click.option(
    "-o", "--output", type=click.Choice(["json", "yaml", "name"]), default=None, help="Output format"
)


def phase_selector(phases: tuple[str, ...]) -> Optional[str]:
    if not phases:
        return None
    return f"{PHASE_LABEL} in ({','.join(phases)})"


def join_selectors(*selectors: Optional[str]) -> Optional[str]:
    return ",".join(s for s in selectors if s) or None


def _require_names(names: tuple[str, ...]) -> None:
    if not names:
        raise click.UsageError("At least one workflow name is required")


def _print_result(wf: dict[str, Any], output: Optional[str], message: str) -> None:
    if output:
        print_object(wf, output)
    else:
        click.echo(message)


@click.command(name="delete", cls=ArgoCommand)
@click.argument("names", nargs=-1)
@click.option("--all", "delete_all", is_flag=True, help="Delete all workflows in the namespace")
@click.option("-l", "--selector", help="Selector (label query) to filter on, e.g. app=hello")
@click.option("--completed", is_flag=True, help="Delete completed workflows")
@click.option("--dry-run", is_flag=True, help="Print the workflows that would be deleted")
@click.pass_context
def delete(
    ctx: click.Context,
    names: tuple[str, ...],
    delete_all: bool,
    selector: Optional[str],
    completed: bool,
    dry_run: bool,
) -> None:
    """Delete workflows.

    \b
    Examples:
      argo delete my-wf
      argo delete --completed
      argo delete -l app=hello
      argo delete --all
    """
    if not (names or delete_all or selector or completed):
        raise click.UsageError("Specify workflow names, --selector, --completed or --all")

    ns = namespace(ctx)
    with open_client(ctx) as (request_ctx, api_client):
        service = api_client.new_workflow_service_client()
        targets = list(names)
        if delete_all or selector or completed:
            labels = join_selectors(selector, phase_selector(COMPLETED_PHASES) if completed else None)
            targets.extend(name_of(wf) for wf in service.list_workflows(request_ctx, ns, selector=labels))

        for name in targets:
            if dry_run:
                click.echo(f"Workflow '{name}' deleted (dry-run)")
                continue
            service.delete_workflow(request_ctx, ns, name)
            click.echo(f"Workflow '{name}' deleted")


@click.command(name="get", cls=ArgoCommand)
@click.argument("names", nargs=-1)
@single_output
@click.pass_context
def get(ctx: click.Context, names: tuple[str, ...], output: Optional[str]) -> None:
    """Display details about workflows."""
    _require_names(names)
    ns = namespace(ctx)
    with open_client(ctx) as (request_ctx, api_client):
        service = api_client.new_workflow_service_client()
        for index, name in enumerate(names):
            wf = service.get_workflow(request_ctx, ns, name)
            if output:
                print_object(wf, output)
                continue
            if index:
                click.echo("")
            print_workflow(wf)


@click.command(name="list", cls=ArgoCommand)
@click.option("-A", "--all-namespaces", is_flag=True, help="Show workflows from all namespaces")
@click.option("-l", "--selector", help="Selector (label query) to filter on, e.g. app=hello")
@click.option("--status", multiple=True, help="Filter by status (Pending, Running, Succeeded, Failed, Error)")
@click.option("--running", is_flag=True, help="Show only running workflows")
@click.option("--completed", is_flag=True, help="Show only completed workflows")
@click.option("-o", "--output", type=click.Choice(OUTPUT_FORMATS), default=None, help="Output format")
@click.pass_context
def list_workflows(
    ctx: click.Context,
    all_namespaces: bool,
    selector: Optional[str],
    status: tuple[str, ...],
    running: bool,
    completed: bool,
    output: Optional[str],
) -> None:
    """List workflows."""
    phases = list(status)
    if running:
        phases.append("Running")
    if completed:
        phases.extend(COMPLETED_PHASES)

    ns = "" if all_namespaces else namespace(ctx)
    with open_client(ctx) as (request_ctx, api_client):
        service = api_client.new_workflow_service_client()
        workflows = service.list_workflows(
            request_ctx, ns, selector=join_selectors(selector, phase_selector(tuple(phases)))
        )

    workflows.sort(key=lambda wf: wf.get("metadata", {}).get("creationTimestamp", ""), reverse=True)
    if output and print_objects(workflows, output):
        return
    print_workflow_table(workflows, wide=output == "wide", all_namespaces=all_namespaces)


@click.command(name="logs", cls=ArgoCommand)
@click.argument("workflow")
@click.argument("pod_name", required=False)
@click.option("-c", "--container", default="main", show_default=True, help="Print the logs of this container")
@click.option("-f", "--follow", is_flag=True, help="Specify if the logs should be streamed")
@click.option("--grep", help="Only print lines that contain this text")
@click.option("--no-color", is_flag=True, help="Disable colorized pod names")
@click.pass_context
def logs(
    ctx: click.Context,
    workflow: str,
    pod_name: Optional[str],
    container: str,
    follow: bool,
    grep: Optional[str],
    no_color: bool,
) -> None:
    """View logs of a pod or workflow.

    \b
    Examples:
      argo logs my-wf
      argo logs my-wf my-pod -c init
      argo logs my-wf --follow
    """
    ns = namespace(ctx)
    with open_client(ctx) as (request_ctx, api_client):
        service = api_client.new_workflow_service_client()
        for entry in service.workflow_logs(
            request_ctx, ns, workflow, pod_name=pod_name, container=container, follow=follow, grep=grep
        ):
            pod = entry.get("podName", "")
            prefix = pod if no_color else styled_text(pod, fg="cyan")
            click.echo(f"{prefix}: {entry.get('content', '')}")


def _run_action(ctx: click.Context, names: tuple[str, ...], action: str, past: str, **kwargs: Any) -> None:
    """Apply one lifecycle action to each named workflow."""
    _require_names(names)
    ns = namespace(ctx)
    with open_client(ctx) as (request_ctx, api_client):
        service = api_client.new_workflow_service_client()
        method = getattr(service, f"{action}_workflow")
        for name in names:
            method(request_ctx, ns, name, **kwargs)
            click.echo(f"workflow {name} {past}")


@click.command(name="resubmit", cls=ArgoCommand)
@click.argument("names", nargs=-1)
@click.option("--memoized", is_flag=True, help="Re-use successful steps & outputs from the previous run")
@single_output
@click.pass_context
def resubmit(ctx: click.Context, names: tuple[str, ...], memoized: bool, output: Optional[str]) -> None:
    """Resubmit one or more workflows."""
    _require_names(names)
    ns = namespace(ctx)
    with open_client(ctx) as (request_ctx, api_client):
        service = api_client.new_workflow_service_client()
        for name in names:
            wf = service.resubmit_workflow(request_ctx, ns, name, memoized=memoized)
            _print_result(wf, output, f"workflow {name} resubmitted as {name_of(wf)}")


@click.command(name="resume", cls=ArgoCommand)
@click.argument("names", nargs=-1)
@click.option("--node-field-selector", help="Selector of nodes to resume, e.g. templateName=approve")
@click.pass_context
def resume(ctx: click.Context, names: tuple[str, ...], node_field_selector: Optional[str]) -> None:
    """Resume zero or more workflows."""
    _run_action(ctx, names, "resume", "resumed", node_field_selector=node_field_selector)


@click.command(name="retry", cls=ArgoCommand)
@click.argument("names", nargs=-1)
@click.option("--restart-successful", is_flag=True, help="Also restart successful nodes matching the selector")
@click.option("--node-field-selector", help="Selector of nodes to reset, e.g. displayName=step-a")
@click.pass_context
def retry(
    ctx: click.Context, names: tuple[str, ...], restart_successful: bool, node_field_selector: Optional[str]
) -> None:
    """Retry zero or more workflows."""
    if restart_successful and not node_field_selector:
        raise click.UsageError("--restart-successful requires --node-field-selector")
    _run_action(
        ctx,
        names,
        "retry",
        "retried",
        restart_successful=restart_successful,
        node_field_selector=node_field_selector,
    )


def _submit_from(
    service: WorkflowServiceClient,
    request_ctx: RequestContext,
    ns: str,
    source: str,
    options: dict[str, Any],
) -> dict[str, Any]:
    kind, sep, name = source.partition("/")
    resource_kind = SUBMIT_KINDS.get(kind.lower())
    if not sep or not name or resource_kind is None:
        raise click.UsageError(
            f"--from must be kind/name with kind one of {', '.join(SUBMIT_KINDS)}, got {source!r}"
        )
    return service.submit_workflow(request_ctx, ns, resource_kind, name, options)


@click.command(name="submit", cls=ArgoCommand)
@click.argument("files", nargs=-1)
@click.option("--from", "from_", metavar="KIND/NAME", help="Submit from a workflow template or cron workflow")
@click.option("-p", "--parameter", "parameters", multiple=True, help="Input parameter, name=value; repeatable")
@click.option("--entrypoint", help="Override entrypoint")
@click.option("--generate-name", help="Override metadata.generateName")
@click.option("-l", "--labels", help="Comma separated labels to apply, e.g. a=b,c=d")
@click.option("--server-dry-run", is_flag=True, help="Send the request to the server in dry-run mode")
@single_output
@click.pass_context
def submit(
    ctx: click.Context,
    files: tuple[str, ...],
    from_: Optional[str],
    parameters: tuple[str, ...],
    entrypoint: Optional[str],
    generate_name: Optional[str],
    labels: Optional[str],
    server_dry_run: bool,
    output: Optional[str],
) -> None:
    """Submit a workflow.

    \b
    Examples:
      argo submit hello-world.yaml -p message=hi
      cat hello-world.yaml | argo submit -
      argo submit --from workflowtemplate/my-wftmpl
    """
    if bool(files) == bool(from_):
        raise click.UsageError("Specify exactly one of: workflow files, --from")

    ns = namespace(ctx)
    with api_errors():
        params = parse_parameters(parameters)
        label_map = parse_labels(labels)
        manifests = [] if from_ else read_manifests(files, kind="Workflow")

    with open_client(ctx) as (request_ctx, api_client):
        service = api_client.new_workflow_service_client()
        if from_:
            options = submit_options(params, entrypoint, generate_name, label_map, server_dry_run)
            created = [_submit_from(service, request_ctx, ns, from_, options)]
        else:
            created = []
            for manifest in manifests:
                wf = apply_submit_options(manifest, params, entrypoint, generate_name, label_map)
                wf_ns = wf["metadata"].get("namespace") or ns
                created.append(service.create_workflow(request_ctx, wf_ns, wf, server_dry_run=server_dry_run))

    for wf in created:
        logger.debug(f"Submitted workflow {name_of(wf)}", extra={"workflow": name_of(wf)})
        if output:
            print_object(wf, output)
        else:
            print_workflow(wf)


@click.command(name="suspend", cls=ArgoCommand)
@click.argument("names", nargs=-1)
@click.pass_context
def suspend(ctx: click.Context, names: tuple[str, ...]) -> None:
    """Suspend zero or more workflows."""
    _run_action(ctx, names, "suspend", "suspended")


@click.command(name="stop", cls=ArgoCommand)
@click.argument("names", nargs=-1)
@click.option("--node-field-selector", help="Selector of nodes to stop, e.g. templateName=slow")
@click.option("--message", help="Message to add to previously running nodes")
@click.pass_context
def stop(ctx: click.Context, names: tuple[str, ...], node_field_selector: Optional[str], message: Optional[str]) -> None:
    """Stop zero or more workflows allowing all exit handlers to run."""
    _run_action(ctx, names, "stop", "stopped", node_field_selector=node_field_selector, message=message)


@click.command(name="terminate", cls=ArgoCommand)
@click.argument("names", nargs=-1)
@click.pass_context
def terminate(ctx: click.Context, names: tuple[str, ...]) -> None:
    """Terminate zero or more workflows immediately, without running exit handlers."""
    _run_action(ctx, names, "terminate", "terminated")
