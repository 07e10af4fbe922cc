"""API client settings with environment variable and flag override support."""

import logging
import os
from collections.abc import Mapping
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator

logger = logging.getLogger(__name__)

ARGO_SERVER = "ARGO_SERVER"
ARGO_HTTP1 = "ARGO_HTTP1"
ARGO_SECURE = "ARGO_SECURE"
ARGO_INSECURE_SKIP_VERIFY = "ARGO_INSECURE_SKIP_VERIFY"
ARGO_BASE_HREF = "ARGO_BASE_HREF"
ARGO_TOKEN = "ARGO_TOKEN"
ARGO_NAMESPACE = "ARGO_NAMESPACE"
ARGO_INSTANCEID = "ARGO_INSTANCEID"
ARGO_REQUEST_TIMEOUT = "ARGO_REQUEST_TIMEOUT"

DEFAULT_NAMESPACE = "default"
DEFAULT_REQUEST_TIMEOUT = 30.0

TOKEN_PREFIXES = ("Bearer ", "Basic ")

# Persistent flag name -> ClientSettings field
FLAG_FIELDS = {
    "argo_server": "argo_server",
    "argo_http1": "http1",
    "secure": "secure",
    "insecure_skip_verify": "insecure_skip_verify",
    "argo_base_href": "base_href",
    "header": "headers",
    "instanceid": "instance_id",
    "namespace": "namespace",
    "token": "token",
    "request_timeout": "request_timeout",
}


def _truthy(raw: Optional[str]) -> bool:
    return str(raw or "").strip().lower() in {"1", "true", "yes", "on"}


def _falsy(raw: Optional[str]) -> bool:
    return str(raw or "").strip().lower() in {"0", "false", "no", "off"}


class ClientSettings(BaseModel):
    """Configuration for talking to the Argo Server.

    Values come from ``ARGO_*`` environment variables first; persistent
    command line flags given explicitly override them.
    """

    argo_server: Optional[str] = Field(default=None, description="host:port of the Argo Server")
    http1: bool = Field(default=False, description="Use the HTTP/1 JSON gateway")
    secure: bool = Field(default=True, description="Connect with TLS")
    insecure_skip_verify: bool = Field(default=False, description="Skip TLS certificate verification")
    base_href: str = Field(default="", description="Path prefix of the server behind an ingress")
    token: Optional[str] = Field(default=None, description="Authorization header value")
    namespace: str = Field(default=DEFAULT_NAMESPACE)
    instance_id: Optional[str] = Field(default=None)
    headers: list[str] = Field(default_factory=list, description="Extra 'Key: Value' request headers")
    request_timeout: float = Field(default=DEFAULT_REQUEST_TIMEOUT, gt=0)

    @field_validator("argo_server")
    @classmethod
    def validate_argo_server(cls, v: Optional[str]) -> Optional[str]:
        """Reject URLs; the server is addressed as host:port."""
        if v is None:
            return v
        v = v.strip()
        if "://" in v:
            raise ValueError(f'Invalid argo server {v!r}: use "host:port", do not prefix with "http" or "https"')
        return v or None

    @field_validator("base_href")
    @classmethod
    def validate_base_href(cls, v: str) -> str:
        """Normalise to a leading slash and no trailing slash."""
        v = v.strip().strip("/")
        return f"/{v}" if v else ""

    @field_validator("namespace")
    @classmethod
    def validate_namespace(cls, v: str) -> str:
        return v.strip() or DEFAULT_NAMESPACE

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ClientSettings":
        """Build settings from ``ARGO_*`` environment variables."""
        env = os.environ if environ is None else environ
        values: dict[str, Any] = {
            "argo_server": env.get(ARGO_SERVER),
            "http1": _truthy(env.get(ARGO_HTTP1)),
            "secure": not _falsy(env.get(ARGO_SECURE)),
            "insecure_skip_verify": _truthy(env.get(ARGO_INSECURE_SKIP_VERIFY)),
            "base_href": env.get(ARGO_BASE_HREF, ""),
            "token": env.get(ARGO_TOKEN) or None,
            "namespace": env.get(ARGO_NAMESPACE, DEFAULT_NAMESPACE),
            "instance_id": env.get(ARGO_INSTANCEID) or None,
        }
        timeout = env.get(ARGO_REQUEST_TIMEOUT)
        if timeout:
            values["request_timeout"] = timeout
        return cls(**values)

    def with_flags(self, flags: Mapping[str, Any]) -> "ClientSettings":
        """Return a copy with explicitly supplied flag values applied.

        Args:
            flags: Explicit persistent flag values keyed by click parameter name.
                Flags that were not given on the command line must be absent.
        """
        update = {FLAG_FIELDS[name]: value for name, value in flags.items() if name in FLAG_FIELDS}
        if not update:
            return self
        if "headers" in update:
            update["headers"] = [*self.headers, *update["headers"]]
        # model_copy skips validation, so rebuild through the constructor
        return type(self)(**{**self.model_dump(), **update})

    @property
    def server_configured(self) -> bool:
        return bool(self.argo_server)
