"""Root-level test configuration and fixtures."""

import os

import pytest
from click.testing import CliRunner

from tests.shared.fake_client import FakeClientFactory, FakeTransport


@pytest.fixture(autouse=True)
def clean_argo_env(monkeypatch):
    """Remove ARGO_* variables so the developer's environment never leaks into tests."""
    for name in list(os.environ):
        if name.startswith("ARGO_"):
            monkeypatch.delenv(name, raising=False)


@pytest.fixture
def runner() -> CliRunner:
    """Create Click CLI runner."""
    return CliRunner()


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def client_factory(monkeypatch, transport: FakeTransport) -> FakeClientFactory:
    """Route every API client the CLI creates to the fake transport."""
    factory = FakeClientFactory(transport)
    monkeypatch.setattr("argo_cli.apiclient.client.new_api_client", factory)
    return factory
