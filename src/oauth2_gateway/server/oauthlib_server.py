"""
oauthlib binding for the OAuth2Server interface.

Wraps the combined ``oauthlib.oauth2.Server`` endpoints. Storage (clients,
codes, tokens) is the job of the ``RequestValidator`` the server was built
with; this module only translates between ProtocolRequest/ProtocolResponse
and oauthlib's ``(uri, http_method, body, headers)`` calling convention.
"""

import json
import logging
from typing import Any
from urllib.parse import urlencode

from oauthlib.oauth2 import Server
from oauthlib.oauth2.rfc6749.errors import AccessDeniedError, FatalClientError, OAuth2Error
from oauthlib.oauth2.rfc6749.tokens import get_token_from_header

from oauth2_gateway.protocol.request import AUTH_PW_HEADER, AUTH_USER_HEADER, ProtocolRequest
from oauth2_gateway.protocol.response import ProtocolResponse
from oauth2_gateway.server.oauth2_server import OAuth2Server
from oauth2_gateway.server.www_authenticate import build_www_authenticate_header

logger = logging.getLogger(__name__)

DEFAULT_REALM = "Service"
FRAGMENT_RESPONSE_TYPES = ("token", "id_token")


def _form_value(value: Any) -> str | None:
    """Form encoding of a JSON body value; objects and arrays have none."""
    if value is None or isinstance(value, (dict, list)):
        return None
    if isinstance(value, bool):
        return json.dumps(value)
    return str(value)


def _uses_fragment(request: ProtocolRequest, credentials: dict) -> bool:
    response_mode = request.get_query("response_mode") or request.get_request("response_mode")
    if response_mode in ("query", "fragment"):
        return response_mode == "fragment"
    response_type = credentials.get("response_type") or request.get_query("response_type") or ""
    return any(part in FRAGMENT_RESPONSE_TYPES for part in response_type.split())


class OAuthlibServer(OAuth2Server):
    def __init__(self, server: Server, realm: str = DEFAULT_REALM):
        self.server = server
        self.realm = realm
        self._response = ProtocolResponse()

    @staticmethod
    def _to_oauthlib(request: ProtocolRequest) -> tuple[str, str, str | None, dict[str, str]]:
        headers = {
            name: value
            for name, value in request.headers.items()
            if name not in (AUTH_USER_HEADER, AUTH_PW_HEADER)
        }
        body = None
        fields = {}
        for key, value in request.request.items():
            encoded = _form_value(value)
            if encoded is not None:
                fields[key] = encoded
        if fields:
            # oauthlib only understands url-encoded bodies
            body = urlencode(fields)
            headers["content-type"] = "application/x-www-form-urlencoded"
        return request.uri, request.method, body, headers

    @staticmethod
    def _apply_result(
        response: ProtocolResponse, headers: dict[str, str], body: str | None, status: int
    ) -> ProtocolResponse:
        response.status_code = status
        response.add_http_headers(dict(headers or {}))
        if body:
            try:
                parameters = json.loads(body)
            except ValueError:
                response.set_content(body)
            else:
                if isinstance(parameters, dict):
                    response.add_parameters(parameters)
                else:
                    response.set_content(body)
        return response

    @staticmethod
    def _apply_error(response: ProtocolResponse, error: OAuth2Error) -> ProtocolResponse:
        response.set_error(
            error.status_code or 400,
            error.error,
            error.description or None,
            error.uri,
        )
        return response

    def _validate(self, request: ProtocolRequest) -> tuple[list[str], dict]:
        uri, method, body, headers = self._to_oauthlib(request)
        scopes, credentials = self.server.validate_authorization_request(
            uri, http_method=method, body=body, headers=headers
        )
        credentials = dict(credentials)
        credentials.pop("request", None)
        return scopes, credentials

    def validate_authorize_request(
        self, request: ProtocolRequest, response: ProtocolResponse
    ) -> bool:
        self._response = response
        try:
            self._validate(request)
        except (FatalClientError, OAuth2Error) as e:
            logger.warning(f"Authorize request rejected: {e.error}")
            self._apply_error(response, e)
            return False
        return True

    def handle_authorize_request(
        self,
        request: ProtocolRequest,
        response: ProtocolResponse,
        is_authorized: bool,
        user_id: str | None = None,
    ) -> ProtocolResponse:
        self._response = response
        try:
            scopes, credentials = self._validate(request)
        except (FatalClientError, OAuth2Error) as e:
            logger.warning(f"Authorize request rejected: {e.error}")
            return self._apply_error(response, e)

        if not is_authorized:
            redirect_uri = credentials.get("redirect_uri")
            if not redirect_uri:
                response.set_error(400, "invalid_request", "No redirect URI is available")
                return response
            denied = AccessDeniedError(description="The user denied access to your application")
            response.set_redirect(
                302,
                redirect_uri,
                credentials.get("state"),
                denied.error,
                denied.description,
                fragment=_uses_fragment(request, credentials),
            )
            return response

        credentials["user"] = user_id
        uri, method, body, headers = self._to_oauthlib(request)
        try:
            result_headers, result_body, status = self.server.create_authorization_response(
                uri,
                http_method=method,
                body=body,
                headers=headers,
                scopes=scopes,
                credentials=credentials,
            )
        except FatalClientError as e:
            logger.warning(f"Authorize request rejected: {e.error}")
            return self._apply_error(response, e)
        return self._apply_result(response, result_headers, result_body, status)

    def handle_token_request(
        self, request: ProtocolRequest, response: ProtocolResponse | None = None
    ) -> ProtocolResponse:
        response = response or ProtocolResponse()
        self._response = response
        uri, method, body, headers = self._to_oauthlib(request)
        result_headers, result_body, status = self.server.create_token_response(
            uri, http_method=method, body=body, headers=headers
        )
        return self._apply_result(response, result_headers, result_body, status)

    def verify_resource_request(
        self,
        request: ProtocolRequest,
        response: ProtocolResponse | None = None,
        scope: str | None = None,
    ) -> bool:
        response = response or ProtocolResponse()
        self._response = response
        uri, method, body, headers = self._to_oauthlib(request)
        valid, oauthlib_request = self.server.verify_request(
            uri,
            http_method=method,
            body=body,
            headers=headers,
            scopes=scope.split() if scope else None,
        )
        if valid:
            return True

        if not get_token_from_header(oauthlib_request):
            # No credentials at all: bare challenge, no error code
            response.status_code = 401
            response.set_http_header(
                "WWW-Authenticate", build_www_authenticate_header(realm=self.realm)
            )
            return False

        description = "The access token provided is invalid"
        response.set_error(401, "invalid_token", description)
        response.set_http_header(
            "WWW-Authenticate",
            build_www_authenticate_header(
                error="invalid_token",
                error_description=description,
                scope=scope,
                realm=self.realm,
            ),
        )
        return False

    def get_response(self) -> ProtocolResponse:
        return self._response
