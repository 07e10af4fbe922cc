"""API client construction bound to the current command context."""

import logging
from collections.abc import Iterator
from contextlib import contextmanager

import click
from pydantic import ValidationError

from argo_cli.apiclient import client as apiclient
from argo_cli.apiclient.client import APIClient, RequestContext
from argo_cli.core.exceptions import ArgoError, ClientError
from argo_cli.core.settings import ClientSettings

from .flags import cli_state, explicit_flags

logger = logging.getLogger(__name__)


def client_settings(ctx: click.Context) -> ClientSettings:
    """Client settings for this invocation: environment, then explicit flags.

    Resolved once and cached on the root context.

    Raises:
        ClientError: If the environment or flags hold invalid values
    """
    state = cli_state(ctx)
    settings = state.get("client_settings")
    if settings is None:
        try:
            settings = ClientSettings.from_env().with_flags(explicit_flags(ctx))
        except ValidationError as e:
            raise ClientError(f"invalid client configuration: {e}") from e
        state["client_settings"] = settings
    return settings


def namespace(ctx: click.Context) -> str:
    with api_errors():
        return client_settings(ctx).namespace


def new_api_client(ctx: click.Context) -> tuple[RequestContext, APIClient]:
    """Create an API client from the settings of the command being run."""
    return apiclient.new_api_client(client_settings(ctx))


@contextmanager
def api_errors() -> Iterator[None]:
    """Report client and server failures as click errors (exit code 1)."""
    try:
        yield
    except ArgoError as e:
        logger.debug("Command failed", exc_info=True)
        raise click.ClickException(str(e)) from e


@contextmanager
def open_client(ctx: click.Context) -> Iterator[tuple[RequestContext, APIClient]]:
    """Yield a request context and API client, closing the client afterwards."""
    with api_errors():
        request_ctx, api_client = new_api_client(ctx)
        with api_client:
            yield request_ctx, api_client
