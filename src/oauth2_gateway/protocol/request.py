"""
Protocol-neutral OAuth2 request value.

Built once per inbound HTTP call by the adapter and handed to the OAuth2
server. Header names are stored lower-cased so lookups are case-insensitive.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

REQUEST_METHOD = "REQUEST_METHOD"
CONTENT_TYPE = "CONTENT_TYPE"
REQUEST_URI = "REQUEST_URI"
QUERY_STRING = "QUERY_STRING"
REMOTE_ADDR = "REMOTE_ADDR"
AUTH_USER = "AUTH_USER"
AUTH_PW = "AUTH_PW"

# Header-equivalent fields carrying HTTP Basic credentials
AUTH_USER_HEADER = "auth-user"
AUTH_PW_HEADER = "auth-pw"


class ProtocolRequest(BaseModel):
    """Immutable OAuth2 request: query, body, headers and server metadata."""

    model_config = ConfigDict(frozen=True)

    query: dict[str, str] = Field(default_factory=dict, description="Query string parameters")
    request: dict[str, Any] = Field(default_factory=dict, description="Parsed body parameters")
    server: dict[str, str] = Field(default_factory=dict, description="Request metadata")
    headers: dict[str, str] = Field(default_factory=dict, description="Header fields")
    content: str = Field("", description="Raw request body")

    @field_validator("headers", mode="before")
    @classmethod
    def _lower_header_names(cls, value: Any) -> Any:
        if isinstance(value, dict):
            return {str(name).lower(): header for name, header in value.items()}
        return value

    def get_query(self, name: str, default: str | None = None) -> str | None:
        return self.query.get(name, default)

    def get_request(self, name: str, default: Any = None) -> Any:
        return self.request.get(name, default)

    def get_header(self, name: str, default: str | None = None) -> str | None:
        return self.headers.get(name.lower(), default)

    def get_server(self, name: str, default: str | None = None) -> str | None:
        return self.server.get(name, default)

    @property
    def method(self) -> str:
        return self.server.get(REQUEST_METHOD, "GET")

    @property
    def uri(self) -> str:
        return self.server.get(REQUEST_URI, "")
