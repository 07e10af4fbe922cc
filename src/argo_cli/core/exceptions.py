"""Custom exceptions for argo-cli."""

from typing import Optional


class ArgoError(Exception):
    """Base exception for all argo-cli errors."""

    pass


class ClientError(ArgoError):
    """Raised when an API client cannot be constructed from the current configuration."""

    pass


class APIError(ArgoError):
    """Raised when a request to the Argo Server fails.

    Covers transport failures (connection refused, timeout, TLS) as well as
    non-2xx responses and undecodable bodies, so callers only ever need to
    handle one exception type for a failed call.
    """

    def __init__(self, message: str, status_code: Optional[int] = None, url: Optional[str] = None):
        self.message = message
        self.status_code = status_code
        self.url = url

        if status_code is not None:
            message = f"{message} (HTTP {status_code})"

        super().__init__(message)

    @property
    def not_found(self) -> bool:
        return self.status_code == 404


class ManifestError(ArgoError):
    """Raised when a workflow manifest cannot be read or is malformed."""

    pass
