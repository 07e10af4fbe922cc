"""Tests for the root argo command tree."""

import click
import pytest

from argo_cli.cli.main import SUBCOMMANDS, new_command


def test_subcommands_registered_in_order():
    command = new_command()

    assert list(command.commands) == [
        "completion",
        "delete",
        "get",
        "list",
        "logs",
        "resubmit",
        "resume",
        "retry",
        "submit",
        "suspend",
        "auth",
        "stop",
        "terminate",
        "archive",
        "version",
        "template",
        "cron",
        "cluster-template",
    ]
    assert len(SUBCOMMANDS) == len(command.commands)


def test_help_lists_commands_in_registration_order(runner):
    result = runner.invoke(new_command(), ["--help"])

    assert result.exit_code == 0
    positions = [result.output.index(f"  {name} ") for name in ("completion", "delete", "archive", "cluster-template")]
    assert positions == sorted(positions)


def test_help_describes_client_modes(runner):
    result = runner.invoke(new_command(), ["-h"])

    assert result.exit_code == 0
    assert "Argo Server GRPC Mode" in result.output
    assert "ARGO_SERVER=localhost:2746" in result.output
    assert "--loglevel" in result.output


def test_no_arguments_prints_help_without_contacting_server(runner, client_factory, monkeypatch):
    monkeypatch.setenv("ARGO_SERVER", "localhost:2746")

    result = runner.invoke(new_command(), [])

    assert result.exit_code == 0
    assert "Usage:" in result.output
    assert client_factory.calls == 0


def test_each_call_builds_a_fresh_tree():
    assert new_command() is not new_command()
    assert new_command().commands["version"] is new_command().commands["version"]


def test_duplicate_subcommand_rejected():
    command = new_command()

    with pytest.raises(ValueError, match="already registered"):
        command.add_command(click.Command("version"))


def test_subcommand_help_accepts_short_flag(runner):
    result = runner.invoke(new_command(), ["version", "-h"])

    assert result.exit_code == 0
    own, _, inherited = result.output.partition("Global Options")
    assert "--short" in own
    assert "-h, --help" in own
    assert "--help" not in inherited
    assert "--loglevel" in inherited


def test_unknown_subcommand_fails(runner):
    result = runner.invoke(new_command(), ["nope"])

    assert result.exit_code == 2
    assert "No such command" in result.output
