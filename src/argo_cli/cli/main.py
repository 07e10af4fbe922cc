"""Root ``argo`` command: command tree, global flags and the pre-run pipeline."""

import logging

import click

from argo_cli.core.compatibility import check_version_compatibility
from argo_cli.core.version import get_version

from .client import new_api_client
from .command import ArgoGroup
from .commands.archive import archive
from .commands.auth import auth
from .commands.cluster_template import cluster_template
from .commands.completion import completion
from .commands.cron import cron
from .commands.template import template
from .commands.version import version
from .commands.workflow import (
    delete,
    get,
    list_workflows,
    logs,
    resubmit,
    resume,
    retry,
    stop,
    submit,
    suspend,
    terminate,
)
from .flags import GlobalOptions, api_client_flags, cli_state, logging_flags
from .logging_config import configure_logging

logger = logging.getLogger(__name__)

CLI_NAME = "argo"

# Registration order is the order commands appear in help
SUBCOMMANDS: tuple[click.Command, ...] = (
    completion,
    delete,
    get,
    list_workflows,
    logs,
    resubmit,
    resume,
    retry,
    submit,
    suspend,
    auth,
    stop,
    terminate,
    archive,
    version,
    template,
    cron,
    cluster_template,
)

ROOT_HELP = """argo is the command line interface to Argo

\b
You can use the CLI in the following modes:

\b
Kubernetes API Mode (default)
  Requests go directly to the Kubernetes API. This client does not
  implement this mode; configure an Argo Server instead.

\b
Argo Server GRPC Mode
  Requests are sent to the Argo Server API. To enable, set ARGO_SERVER:
    ARGO_SERVER=localhost:2746   # "host:port", do not prefix with "http" or "https"
  If the server runs without TLS ("argo server --secure=false"):
    ARGO_SECURE=false
  If the server uses self-signed certificates (do not use in production):
    ARGO_INSECURE_SKIP_VERIFY=true
  Then set the namespace and token:
    ARGO_NAMESPACE=argo
    ARGO_TOKEN='Bearer ******'   # must start with "Bearer " or "Basic "

\b
Argo Server HTTP1 Mode
  As per GRPC mode, for load-balancers that do not support HTTP/2:
    ARGO_HTTP1=true
  If the server is behind an ingress with a path ("argo server --basehref /argo"):
    ARGO_BASE_HREF=/argo
"""


def _persistent_pre_run(ctx: click.Context) -> None:
    """Startup pipeline run before every subcommand.

    Resolves the global options, configures logging, then runs the
    best-effort version check. Nothing here can stop the subcommand.
    """
    state = cli_state(ctx)
    options = GlobalOptions.from_flags(state.get("flags", {}))
    state["options"] = options

    configure_logging(options.log_level, options.glog_level)

    cli_version = get_version().version
    logger.debug(f"CLI version: {cli_version}", extra={"version": cli_version})

    state["compatibility"] = check_version_compatibility(lambda: new_api_client(ctx))


def _show_help(ctx: click.Context) -> None:
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


def new_command() -> ArgoGroup:
    """Build the root ``argo`` command with every subcommand attached."""
    command = ArgoGroup(
        name=CLI_NAME,
        help=ROOT_HELP,
        short_help="argo is the command line interface to Argo",
        invoke_without_command=True,
        callback=click.pass_context(_show_help),
        context_settings={"help_option_names": ["-h", "--help"]},
        persistent_params=[*logging_flags(), *api_client_flags()],
        persistent_pre_run=_persistent_pre_run,
    )
    for subcommand in SUBCOMMANDS:
        command.add_command(subcommand)
    return command


def cli_main() -> None:
    """Console script entry point."""
    new_command().main(prog_name=CLI_NAME)
