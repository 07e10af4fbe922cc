"""Info service: server version."""

from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from argo_cli.core.exceptions import APIError

from .transport import HTTPTransport

if TYPE_CHECKING:
    from .client import RequestContext


class GetVersionRequest(BaseModel):
    """Empty request for the version endpoint."""


class VersionInfo(BaseModel):
    """Version information reported by the Argo Server."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    version: str = ""
    build_date: str = Field(default="", alias="buildDate")
    git_commit: str = Field(default="", alias="gitCommit")
    git_tag: str = Field(default="", alias="gitTag")
    git_tree_state: str = Field(default="", alias="gitTreeState")
    go_version: str = Field(default="", alias="goVersion")
    compiler: str = ""
    platform: str = ""


class InfoServiceClient:
    def __init__(self, transport: HTTPTransport):
        self.transport = transport

    def get_version(self, ctx: "RequestContext", request: GetVersionRequest) -> VersionInfo:
        del request
        data = self.transport.request(ctx, "GET", "api/v1/version")
        try:
            return VersionInfo.model_validate(data)
        except ValidationError as e:
            raise APIError(f"invalid version response: {e}") from e
