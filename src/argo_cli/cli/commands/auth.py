"""Authentication commands."""

import click

from argo_cli.cli.client import api_errors, client_settings
from argo_cli.cli.command import ArgoGroup


@click.group(name="auth", cls=ArgoGroup)
def auth() -> None:
    """Manage authentication settings."""
    pass


@auth.command()
@click.pass_context
def token(ctx: click.Context) -> None:
    """Print the auth token sent to the Argo Server."""
    with api_errors():
        settings = client_settings(ctx)
    if not settings.token:
        raise click.ClickException("No token configured; set ARGO_TOKEN or pass --token")
    click.echo(settings.token)
