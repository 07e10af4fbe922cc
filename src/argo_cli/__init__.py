"""argo-cli - command line interface to Argo Workflows."""

__version__ = "3.4.0"
