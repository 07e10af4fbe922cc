"""Core services shared by the CLI and the API client."""

from .exceptions import APIError, ArgoError, ClientError, ManifestError

__all__ = ["APIError", "ArgoError", "ClientError", "ManifestError"]
