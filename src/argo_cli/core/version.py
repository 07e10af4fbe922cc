"""Build version of the local CLI."""

import platform
import sys
from dataclasses import dataclass

from argo_cli import __version__


@dataclass(frozen=True)
class Version:
    """Version information for this client build."""

    version: str
    git_tag: str
    python_version: str
    platform: str


def get_version() -> Version:
    """Return the version of the running CLI.

    The git tag is the release tag the package was cut from and is the value
    compared against the server's ``gitTag``.
    """
    tag = __version__ if __version__.startswith("v") else f"v{__version__}"
    return Version(
        version=tag,
        git_tag=tag,
        python_version=f"{sys.implementation.name}{platform.python_version()}",
        platform=f"{sys.platform}/{platform.machine().lower() or 'unknown'}",
    )
