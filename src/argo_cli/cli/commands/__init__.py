"""Subcommands of the argo CLI."""
