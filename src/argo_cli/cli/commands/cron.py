"""Cron workflow commands."""

from typing import Any

import click

from argo_cli.apiclient.client import APIClient
from argo_cli.apiclient.resources import CronWorkflowServiceClient
from argo_cli.cli.client import namespace, open_client

from .resource import resource_group


def _service(api_client: APIClient) -> CronWorkflowServiceClient:
    return api_client.new_cron_workflow_service_client()


def _schedule(cron_wf: dict[str, Any]) -> str:
    spec = cron_wf.get("spec", {})
    return spec.get("schedule") or ",".join(spec.get("schedules") or [])


cron = resource_group(
    name="cron",
    help_text="Manage cron workflows.",
    kind="CronWorkflow",
    plural="cron workflows",
    service_factory=_service,
    columns=[
        ("SCHEDULE", _schedule),
        ("SUSPENDED", lambda cw: str(bool(cw.get("spec", {}).get("suspend"))).lower()),
        ("LAST RUN", lambda cw: cw.get("status", {}).get("lastScheduledTime", "")),
    ],
)


@cron.command()
@click.argument("names", nargs=-1, required=True)
@click.pass_context
def suspend(ctx: click.Context, names: tuple[str, ...]) -> None:
    """Suspend cron workflows."""
    ns = namespace(ctx)
    with open_client(ctx) as (request_ctx, api_client):
        service = _service(api_client)
        for name in names:
            service.suspend(request_ctx, name, ns)
            click.echo(f"CronWorkflow '{name}' suspended")


@cron.command()
@click.argument("names", nargs=-1, required=True)
@click.pass_context
def resume(ctx: click.Context, names: tuple[str, ...]) -> None:
    """Resume suspended cron workflows."""
    ns = namespace(ctx)
    with open_client(ctx) as (request_ctx, api_client):
        service = _service(api_client)
        for name in names:
            service.resume(request_ctx, name, ns)
            click.echo(f"CronWorkflow '{name}' resumed")
