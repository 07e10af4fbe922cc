"""Tests for the CLI/server version compatibility check."""

import logging

import pytest

from argo_cli.core.compatibility import CompatibilityOutcome, check_version_compatibility
from argo_cli.core.exceptions import APIError, ClientError
from tests.shared.fake_client import FakeClientFactory, FakeTransport

SERVER_ENV = {"ARGO_SERVER": "localhost:2746"}


def _server_returning(tag: str) -> FakeClientFactory:
    return FakeClientFactory(FakeTransport({("GET", "api/v1/version"): {"version": tag, "gitTag": tag}}))


def _warnings(caplog) -> list[logging.LogRecord]:
    return [r for r in caplog.records if r.levelno == logging.WARNING]


@pytest.fixture(autouse=True)
def capture_warnings(caplog):
    caplog.set_level(logging.DEBUG, logger="argo_cli")


class TestApplicability:
    def test_skipped_without_argo_server(self, caplog):
        factory = _server_returning("v3.4.0")

        outcome = check_version_compatibility(factory, local_version="v3.4.0", environ={})

        assert outcome is CompatibilityOutcome.SKIPPED
        assert factory.calls == 0
        assert factory.transport.calls == []
        assert _warnings(caplog) == []

    def test_empty_argo_server_still_counts_as_configured(self):
        factory = _server_returning("v3.4.0")

        outcome = check_version_compatibility(factory, local_version="v3.4.0", environ={"ARGO_SERVER": ""})

        assert outcome is CompatibilityOutcome.MATCH
        assert factory.calls == 1

    def test_reads_process_environment_by_default(self, monkeypatch):
        factory = _server_returning("v3.4.0")
        monkeypatch.delenv("ARGO_SERVER", raising=False)

        assert check_version_compatibility(factory, local_version="v3.4.0") is CompatibilityOutcome.SKIPPED

        monkeypatch.setenv("ARGO_SERVER", "localhost:2746")
        assert check_version_compatibility(factory, local_version="v3.4.0") is CompatibilityOutcome.MATCH


class TestComparison:
    def test_matching_versions_log_nothing(self, caplog):
        factory = _server_returning("v3.4.0")

        outcome = check_version_compatibility(factory, local_version="v3.4.0", environ=SERVER_ENV)

        assert outcome is CompatibilityOutcome.MATCH
        assert _warnings(caplog) == []
        assert factory.transport.paths() == ["api/v1/version"]

    def test_mismatch_logs_one_warning_with_both_versions(self, caplog):
        factory = _server_returning("v3.3.8")

        outcome = check_version_compatibility(factory, local_version="v3.4.0", environ=SERVER_ENV)

        assert outcome is CompatibilityOutcome.MISMATCH
        warnings = _warnings(caplog)
        assert len(warnings) == 1
        message = warnings[0].getMessage()
        assert "v3.4.0" in message
        assert "v3.3.8" in message
        assert "unexpected behavior" in message
        assert warnings[0].__dict__["server_version"] == "v3.3.8"

    def test_versions_compared_as_opaque_strings(self, caplog):
        factory = _server_returning("3.4.0")

        outcome = check_version_compatibility(factory, local_version="v3.4.0", environ=SERVER_ENV)

        assert outcome is CompatibilityOutcome.MISMATCH

    def test_defaults_to_running_build_version(self, monkeypatch):
        monkeypatch.setattr("argo_cli.core.version.__version__", "3.9.1")
        factory = _server_returning("v3.9.1")

        assert check_version_compatibility(factory, environ=SERVER_ENV) is CompatibilityOutcome.MATCH


class TestFailures:
    def test_client_construction_failure_warns_once(self, caplog):
        factory = FakeClientFactory(error=ClientError("bad token"))

        outcome = check_version_compatibility(factory, local_version="v3.4.0", environ=SERVER_ENV)

        assert outcome is CompatibilityOutcome.CHECK_FAILED
        warnings = _warnings(caplog)
        assert len(warnings) == 1
        assert "Failed to create service client: bad token" in warnings[0].getMessage()

    def test_remote_call_failure_warns_once(self, caplog):
        transport = FakeTransport({("GET", "api/v1/version"): APIError("connection refused")})
        factory = FakeClientFactory(transport)

        outcome = check_version_compatibility(factory, local_version="v3.4.0", environ=SERVER_ENV)

        assert outcome is CompatibilityOutcome.CHECK_FAILED
        warnings = _warnings(caplog)
        assert len(warnings) == 1
        assert "Failed to connect to Argo Server: connection refused" in warnings[0].getMessage()

    def test_unauthorized_response_is_a_failed_check(self, caplog):
        transport = FakeTransport({("GET", "api/v1/version"): APIError("token not valid", status_code=401)})

        outcome = check_version_compatibility(
            FakeClientFactory(transport), local_version="v3.4.0", environ=SERVER_ENV
        )

        assert outcome is CompatibilityOutcome.CHECK_FAILED
        assert "HTTP 401" in _warnings(caplog)[0].getMessage()

    def test_client_is_closed_after_check(self):
        factory = _server_returning("v3.4.0")

        check_version_compatibility(factory, local_version="v3.4.0", environ=SERVER_ENV)

        assert factory.transport.closed is True

    def test_unexpected_errors_are_not_swallowed(self):
        factory = FakeClientFactory(error=RuntimeError("bug"))

        with pytest.raises(RuntimeError):
            check_version_compatibility(factory, local_version="v3.4.0", environ=SERVER_ENV)
