"""
Protocol-neutral OAuth2 response.

The OAuth2 server populates it (status, headers, body parameters); the gateway
only reads it when building the HTTP reply.
"""

import json
import logging
from typing import Any

from oauthlib.common import add_params_to_uri

logger = logging.getLogger(__name__)


class ProtocolResponse:
    def __init__(
        self,
        parameters: dict[str, Any] | None = None,
        status_code: int = 200,
        headers: dict[str, str] | None = None,
    ):
        self.parameters: dict[str, Any] = dict(parameters or {})
        self.status_code = status_code
        self.http_headers: dict[str, str] = dict(headers or {})
        self.content: str | None = None

    def __repr__(self) -> str:
        return f"ProtocolResponse(status_code={self.status_code}, error={self.get_parameter('error')})"

    # Parameters

    def get_parameter(self, name: str, default: Any = None) -> Any:
        return self.parameters.get(name, default)

    def set_parameter(self, name: str, value: Any) -> None:
        self.parameters[name] = value

    def add_parameters(self, parameters: dict[str, Any]) -> None:
        self.parameters.update(parameters)

    # Headers

    def get_http_header(self, name: str, default: str | None = None) -> str | None:
        lowered = name.lower()
        for header, value in self.http_headers.items():
            if header.lower() == lowered:
                return value
        return default

    def set_http_header(self, name: str, value: str) -> None:
        for header in list(self.http_headers):
            if header.lower() == name.lower():
                del self.http_headers[header]
        self.http_headers[name] = value

    def add_http_headers(self, headers: dict[str, str]) -> None:
        for name, value in headers.items():
            self.set_http_header(name, value)

    # Status classes

    def is_informational(self) -> bool:
        return 100 <= self.status_code < 200

    def is_successful(self) -> bool:
        return 200 <= self.status_code < 300

    def is_redirection(self) -> bool:
        return 300 <= self.status_code < 400

    def is_client_error(self) -> bool:
        return 400 <= self.status_code < 500

    def is_server_error(self) -> bool:
        return 500 <= self.status_code < 600

    # Body

    def get_response_body(self) -> str:
        """Raw content when the server supplied one, else the JSON encoded parameters."""
        if self.content is not None:
            return self.content
        if not self.parameters:
            return ""
        return json.dumps(self.parameters)

    def set_content(self, content: str) -> None:
        self.content = content

    # Error helpers

    def set_error(
        self,
        status_code: int,
        error: str,
        error_description: str | None = None,
        error_uri: str | None = None,
    ) -> None:
        self.status_code = status_code
        self.parameters = {"error": error}
        if error_description:
            self.parameters["error_description"] = error_description
        if error_uri:
            self.parameters["error_uri"] = error_uri
        self.content = None
        self.set_http_header("Cache-Control", "no-store")

    def set_redirect(
        self,
        status_code: int,
        url: str,
        state: str | None = None,
        error: str | None = None,
        error_description: str | None = None,
        error_uri: str | None = None,
        extra_parameters: dict[str, str] | None = None,
        fragment: bool = False,
    ) -> None:
        """
        Point the response at ``url``, appending the OAuth2 redirect parameters.

        Parameters go to the query, or to the fragment when ``fragment`` is set
        (implicit grant responses). Parameters already present in the redirect
        URI are preserved.
        """
        if not url:
            raise ValueError("Redirect URL cannot be empty")

        params: dict[str, str] = dict(extra_parameters or {})
        if state:
            params["state"] = state
        if error:
            params["error"] = error
            if error_description:
                params["error_description"] = error_description
            if error_uri:
                params["error_uri"] = error_uri

        self.status_code = status_code
        self.set_http_header("Location", add_params_to_url(url, params, fragment))
        logger.debug(f"Response redirect set with status {status_code}")


def add_params_to_url(url: str, params: dict[str, str], fragment: bool = False) -> str:
    if not params:
        return url
    return add_params_to_uri(url, list(params.items()), fragment=fragment)
