"""Global options and the persistent flags every command inherits."""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import click
from click.core import ParameterSource

from .logging_config import LOG_LEVELS

DEFAULT_LOG_LEVEL = "info"
DEFAULT_GLOG_LEVEL = 0
VERBOSE_LOG_LEVEL = "debug"
VERBOSE_GLOG_LEVEL = 6


@dataclass(frozen=True)
class GlobalOptions:
    """Process-wide settings resolved from the persistent flags.

    ``verbose`` always wins: it forces debug logging and glog level 6
    regardless of explicit ``--loglevel``/``--gloglevel`` values.
    """

    log_level: str = DEFAULT_LOG_LEVEL
    glog_level: int = DEFAULT_GLOG_LEVEL
    verbose: bool = False

    def __post_init__(self) -> None:
        if self.verbose:
            object.__setattr__(self, "log_level", VERBOSE_LOG_LEVEL)
            object.__setattr__(self, "glog_level", VERBOSE_GLOG_LEVEL)

    @classmethod
    def from_flags(cls, flags: Mapping[str, Any]) -> "GlobalOptions":
        return cls(
            log_level=flags.get("loglevel", DEFAULT_LOG_LEVEL),
            glog_level=flags.get("gloglevel", DEFAULT_GLOG_LEVEL),
            verbose=bool(flags.get("verbose", False)),
        )


def cli_state(ctx: click.Context) -> dict[str, Any]:
    """The per-invocation state dict stored on the root context."""
    return ctx.find_root().ensure_object(dict)


def explicit_flags(ctx: click.Context) -> dict[str, Any]:
    """Persistent flag values that were given on the command line."""
    state = cli_state(ctx)
    flags = state.get("flags", {})
    return {name: flags[name] for name in state.get("explicit_flags", set()) if name in flags}


def record_flag(ctx: click.Context, param: click.Parameter, value: Any) -> Any:
    """Store a persistent flag value in the root context.

    Persistent flags are parsed by whichever command on the path they appear
    after, so the same flag may be processed several times. Defaults never
    replace a value that is already recorded; explicit values replace earlier
    ones, and repeatable flags accumulate.
    """
    state = cli_state(ctx)
    flags = state.setdefault("flags", {})
    explicit = state.setdefault("explicit_flags", set())
    name = param.name

    if ctx.get_parameter_source(name) in (None, ParameterSource.DEFAULT):
        flags.setdefault(name, value)
    elif param.multiple and name in explicit:
        flags[name] = (*flags[name], *value)
    else:
        flags[name] = value
        explicit.add(name)
    return value


def _persistent_option(*decls: str, **attrs: Any) -> click.Option:
    return click.Option(list(decls), expose_value=False, callback=record_flag, **attrs)


def logging_flags() -> list[click.Option]:
    return [
        _persistent_option(
            "--loglevel",
            type=click.Choice(list(LOG_LEVELS), case_sensitive=False),
            default=DEFAULT_LOG_LEVEL,
            show_default=True,
            help="Set the logging level. One of: debug|info|warn|error",
        ),
        _persistent_option(
            "--gloglevel",
            type=int,
            default=DEFAULT_GLOG_LEVEL,
            show_default=True,
            help="Set the glog logging level",
        ),
        _persistent_option(
            "-v",
            "--verbose",
            is_flag=True,
            default=False,
            help="Enabled verbose logging, i.e. --loglevel debug",
        ),
    ]


def api_client_flags() -> list[click.Option]:
    """Flags selecting and configuring the Argo Server connection.

    Each overrides the ARGO_* environment variable named in its help.
    """
    return [
        _persistent_option("--argo-server", metavar="HOST:PORT", help="API server host:port (ARGO_SERVER)"),
        _persistent_option(
            "--argo-http1", is_flag=True, default=False, help="Use HTTP/1 for the Argo Server (ARGO_HTTP1)"
        ),
        _persistent_option(
            "-s",
            "--secure/--no-secure",
            default=True,
            help="Whether or not the server is using TLS with the Argo Server (ARGO_SECURE)",
        ),
        _persistent_option(
            "-k",
            "--insecure-skip-verify",
            is_flag=True,
            default=False,
            help="Skip TLS certificate verification; insecure (ARGO_INSECURE_SKIP_VERIFY)",
        ),
        _persistent_option(
            "-e", "--argo-base-href", metavar="PATH", help="Path prefix of the Argo Server (ARGO_BASE_HREF)"
        ),
        _persistent_option(
            "-H",
            "--header",
            multiple=True,
            metavar="'KEY: VALUE'",
            help="Additional HTTP header sent with every request; repeatable",
        ),
        _persistent_option("--instanceid", help="Controller instance id to filter by (ARGO_INSTANCEID)"),
        _persistent_option("-n", "--namespace", help="Namespace for the request (ARGO_NAMESPACE)"),
        _persistent_option("--token", help='Authorization token, "Bearer ..." or "Basic ..." (ARGO_TOKEN)'),
        _persistent_option(
            "--request-timeout", type=float, metavar="SECONDS", help="Request timeout (ARGO_REQUEST_TIMEOUT)"
        ),
    ]
