"""Transport mode resolution and the HTTP transport to the Argo Server."""

import json
import logging
from collections.abc import Iterator
from enum import Enum
from typing import TYPE_CHECKING, Any, Optional, Union

import requests

from argo_cli.core.exceptions import APIError
from argo_cli.core.settings import ClientSettings

if TYPE_CHECKING:
    from .client import RequestContext

logger = logging.getLogger(__name__)


class ClientMode(str, Enum):
    """How the CLI reaches the workflow controller's API."""

    KUBERNETES = "kubernetes"
    GRPC = "grpc"
    HTTP1 = "http1"


def resolve_client_mode(settings: ClientSettings) -> ClientMode:
    """Pick the client mode from the settings.

    No Argo Server means Kubernetes API mode; otherwise HTTP1 when asked
    for, gRPC by default.
    """
    if not settings.server_configured:
        return ClientMode.KUBERNETES
    if settings.http1:
        return ClientMode.HTTP1
    return ClientMode.GRPC


def server_url(settings: ClientSettings) -> str:
    """Base URL of the Argo Server, including any base href."""
    scheme = "https" if settings.secure else "http"
    return f"{scheme}://{settings.argo_server}{settings.base_href}"


def _error_message(response: requests.Response) -> str:
    """Extract the server's error message from a failed response."""
    try:
        body = response.json()
    except ValueError:
        text = response.text.strip()
        return text or response.reason or "request failed"
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return response.reason or "request failed"


class HTTPTransport:
    """JSON over HTTP/1 to the Argo Server gateway.

    Every failure is raised as ``APIError``; no ``requests`` exception escapes.
    """

    def __init__(self, base_url: str, verify: bool = True, session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.session.verify = verify

    def url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def _send(
        self,
        ctx: "RequestContext",
        method: str,
        path: str,
        params: Optional[dict[str, Any]] = None,
        body: Optional[dict[str, Any]] = None,
        stream: bool = False,
        timeout: Optional[Union[float, tuple[Optional[float], Optional[float]]]] = None,
    ) -> requests.Response:
        url = self.url(path)
        if timeout is None:
            timeout = ctx.timeout
        logger.debug(f"{method} {url}", extra={"method": method, "url": url, "params": params})
        try:
            response = self.session.request(
                method=method,
                url=url,
                headers=dict(ctx.headers),
                params=params,
                json=body,
                timeout=timeout,
                stream=stream,
            )
        except requests.Timeout as e:
            raise APIError(f"request to {url} timed out after {ctx.timeout} seconds", url=url) from e
        except requests.ConnectionError as e:
            raise APIError(f"could not connect to {url}: {e}", url=url) from e
        except requests.RequestException as e:
            raise APIError(f"request to {url} failed: {e}", url=url) from e

        if not response.ok:
            message = _error_message(response)
            response.close()
            raise APIError(message, status_code=response.status_code, url=url)
        return response

    def request(
        self,
        ctx: "RequestContext",
        method: str,
        path: str,
        params: Optional[dict[str, Any]] = None,
        body: Optional[dict[str, Any]] = None,
    ) -> dict[str, Any]:
        """Send one request and return the decoded JSON object."""
        response = self._send(ctx, method, path, params=params, body=body)
        if not response.content:
            return {}
        try:
            data = response.json()
        except ValueError as e:
            raise APIError(
                f"invalid JSON in response from {response.url}: {e}", status_code=response.status_code, url=response.url
            ) from e
        if not isinstance(data, dict):
            raise APIError(f"unexpected response from {response.url}: expected JSON object", url=response.url)
        return data

    def stream(
        self,
        ctx: "RequestContext",
        path: str,
        params: Optional[dict[str, Any]] = None,
        follow: bool = False,
    ) -> Iterator[dict[str, Any]]:
        """Yield ``result`` objects from a newline-delimited JSON stream.

        Lines are yielded as soon as they arrive. A followed stream only
        applies the request timeout to connecting and may stay idle forever.
        """
        url = self.url(path)
        timeout = (ctx.timeout, None) if follow else None
        response = self._send(ctx, "GET", path, params=params, stream=True, timeout=timeout)
        try:
            for line in response.iter_lines(chunk_size=None, decode_unicode=True):
                if not line:
                    continue
                try:
                    event = json.loads(line)
                except json.JSONDecodeError as e:
                    raise APIError(f"invalid event in stream from {path}: {e}", url=url) from e
                if "error" in event:
                    error = event["error"] or {}
                    raise APIError(str(error.get("message") or error), url=url)
                yield event.get("result") or {}
        except requests.RequestException as e:
            raise APIError(f"stream from {path} interrupted: {e}", url=url) from e
        finally:
            response.close()

    def close(self) -> None:
        self.session.close()
