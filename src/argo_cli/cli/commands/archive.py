"""Archived workflow commands."""

from typing import Optional

import click

from argo_cli.cli.client import namespace, open_client
from argo_cli.cli.command import ArgoGroup
from argo_cli.cli.output import OUTPUT_FORMATS, print_object, print_objects, print_workflow_table


@click.group(name="archive", cls=ArgoGroup)
def archive() -> None:
    """Manage the workflow archive."""
    pass


@archive.command(name="list")
@click.option("-A", "--all-namespaces", is_flag=True, help="Show archived workflows from all namespaces")
@click.option("-l", "--selector", help="Selector (label query) to filter on, e.g. app=hello")
@click.option("-o", "--output", type=click.Choice(OUTPUT_FORMATS), default=None, help="Output format")
@click.pass_context
def list_archived(ctx: click.Context, all_namespaces: bool, selector: Optional[str], output: Optional[str]) -> None:
    """List workflows in the archive."""
    ns = None if all_namespaces else namespace(ctx)
    with open_client(ctx) as (request_ctx, api_client):
        service = api_client.new_archived_workflow_service_client()
        workflows = service.list_archived_workflows(request_ctx, namespace=ns, selector=selector)

    if output and print_objects(workflows, output):
        return
    print_workflow_table(workflows, wide=output == "wide", all_namespaces=all_namespaces)


@archive.command(name="get")
@click.argument("uid")
@click.option("-o", "--output", type=click.Choice(["json", "yaml", "name"]), default="json", show_default=True)
@click.pass_context
def get_archived(ctx: click.Context, uid: str, output: str) -> None:
    """Get an archived workflow by UID."""
    with open_client(ctx) as (request_ctx, api_client):
        wf = api_client.new_archived_workflow_service_client().get_archived_workflow(request_ctx, uid)
    print_object(wf, output)


@archive.command(name="delete")
@click.argument("uids", nargs=-1, required=True)
@click.pass_context
def delete_archived(ctx: click.Context, uids: tuple[str, ...]) -> None:
    """Delete archived workflows by UID."""
    with open_client(ctx) as (request_ctx, api_client):
        service = api_client.new_archived_workflow_service_client()
        for uid in uids:
            service.delete_archived_workflow(request_ctx, uid)
            click.echo(f"Archived workflow '{uid}' deleted")
