"""argo CLI module.

``cli_main`` is the console script entry point; ``new_command`` builds the
root command for embedding and tests.
"""

from .main import cli_main, new_command

__all__ = ["cli_main", "new_command"]
