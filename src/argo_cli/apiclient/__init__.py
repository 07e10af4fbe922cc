"""Client for the Argo Server API."""

from .client import APIClient, RequestContext, new_api_client
from .info import GetVersionRequest, InfoServiceClient, VersionInfo
from .transport import ClientMode, HTTPTransport, resolve_client_mode

__all__ = [
    "APIClient",
    "ClientMode",
    "GetVersionRequest",
    "HTTPTransport",
    "InfoServiceClient",
    "RequestContext",
    "VersionInfo",
    "new_api_client",
    "resolve_client_mode",
]
