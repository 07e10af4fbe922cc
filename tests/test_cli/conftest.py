"""Shared fixtures for CLI tests."""

import pytest

from argo_cli.cli.main import new_command


@pytest.fixture
def argo(runner, client_factory):
    """Invoke a freshly built root command with every API client routed to the fake transport."""

    def invoke(*args, **kwargs):
        return runner.invoke(new_command(), list(args), **kwargs)

    return invoke
