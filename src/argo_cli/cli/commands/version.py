"""Print client and server versions."""

import click

from argo_cli.apiclient.info import GetVersionRequest
from argo_cli.cli.client import api_errors, client_settings, open_client
from argo_cli.cli.command import ArgoCommand
from argo_cli.core.version import get_version


@click.command(name="version", cls=ArgoCommand)
@click.option("--short", is_flag=True, help="Print just the version number")
@click.pass_context
def version(ctx: click.Context, short: bool) -> None:
    """Print version information.

    The server version is printed too when an Argo Server is configured.
    """
    cli_name = ctx.find_root().info_name or "argo"
    local = get_version()
    click.echo(f"{cli_name}: {local.version}")
    if not short:
        click.echo(f"  GitTag: {local.git_tag}")
        click.echo(f"  PythonVersion: {local.python_version}")
        click.echo(f"  Platform: {local.platform}")

    with api_errors():
        configured = client_settings(ctx).server_configured
    if not configured:
        return
    with open_client(ctx) as (request_ctx, api_client):
        server = api_client.new_info_service_client().get_version(request_ctx, GetVersionRequest())
    click.echo(f"argo-server: {server.version}")
    if not short:
        for label, value in [
            ("BuildDate", server.build_date),
            ("GitCommit", server.git_commit),
            ("GitTreeState", server.git_tree_state),
            ("GitTag", server.git_tag),
            ("GoVersion", server.go_version),
            ("Compiler", server.compiler),
            ("Platform", server.platform),
        ]:
            if value:
                click.echo(f"  {label}: {value}")
