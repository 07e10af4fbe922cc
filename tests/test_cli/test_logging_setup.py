"""Tests for logging configuration from the global options."""

import logging

import pytest

from argo_cli.cli.logging_config import TRANSPORT_LOGGERS, configure_logging, transport_log_level


@pytest.fixture
def restore_levels():
    names = ["", *TRANSPORT_LOGGERS]
    saved = {name: logging.getLogger(name).level for name in names}
    yield
    for name, level in saved.items():
        logging.getLogger(name).setLevel(level)


@pytest.mark.parametrize(
    "glog, expected",
    [(0, logging.WARNING), (3, logging.WARNING), (4, logging.INFO), (6, logging.DEBUG), (9, logging.DEBUG)],
)
def test_transport_log_level(glog, expected):
    assert transport_log_level(glog) == expected


def test_skipped_under_pytest(restore_levels):
    logging.getLogger().setLevel(logging.ERROR)

    configure_logging("debug", 6)

    assert logging.getLogger().level == logging.ERROR


def test_sets_root_and_transport_levels(monkeypatch, restore_levels):
    monkeypatch.delenv("PYTEST_CURRENT_TEST", raising=False)

    configure_logging("WARN", 6)

    assert logging.getLogger().level == logging.WARNING
    assert logging.getLogger("urllib3").level == logging.DEBUG


def test_transport_quiet_by_default(monkeypatch, restore_levels):
    monkeypatch.delenv("PYTEST_CURRENT_TEST", raising=False)

    configure_logging("debug")

    assert logging.getLogger().level == logging.DEBUG
    assert logging.getLogger("requests").level == logging.WARNING
