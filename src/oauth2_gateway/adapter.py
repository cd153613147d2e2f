"""
Protocol Request/Response Adapter

Marshals a Starlette request into a ProtocolRequest:

- query string
- body parameters, parsed according to the content type
- "server" metadata, specifically the request method and content type
- raw content
- headers, seeded with HTTP Basic credentials

so that JSON or form requests providing client credentials can be processed
by the OAuth2 server, and maps the server's ProtocolResponse back onto HTTP.
"""

import base64
import binascii
import json
import logging
from typing import Any

from fastapi import Request
from fastapi.responses import Response

from oauth2_gateway.api_problem import ApiProblem, ApiProblemResponse
from oauth2_gateway.protocol.request import (
    AUTH_PW,
    AUTH_PW_HEADER,
    AUTH_USER,
    AUTH_USER_HEADER,
    CONTENT_TYPE,
    QUERY_STRING,
    REMOTE_ADDR,
    REQUEST_METHOD,
    REQUEST_URI,
    ProtocolRequest,
)
from oauth2_gateway.protocol.response import ProtocolResponse

logger = logging.getLogger(__name__)

FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


def parse_basic_auth(authorization: str | None) -> tuple[str, str] | None:
    """Decode an ``Authorization: Basic`` header into (username, password)."""
    if not authorization:
        return None
    scheme, _, credentials = authorization.partition(" ")
    if scheme.lower() != "basic" or not credentials:
        return None
    try:
        decoded = base64.b64decode(credentials.strip(), validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError):
        logger.debug("Ignoring malformed Basic credentials")
        return None
    username, separator, password = decoded.partition(":")
    if not separator:
        return None
    return username, password


async def _parse_body(request: Request, content_type: str, raw: bytes) -> dict[str, Any]:
    if not raw:
        return {}
    media_type = content_type.split(";", 1)[0].strip().lower()
    try:
        if media_type == "application/json" or media_type.endswith("+json"):
            data = json.loads(raw)
            return data if isinstance(data, dict) else {}
        if media_type in FORM_CONTENT_TYPES:
            form = await request.form()
            return {key: value for key, value in form.items() if isinstance(value, str)}
    except Exception as e:
        logger.debug(f"Unable to parse {media_type} request body: {e}")
    return {}


async def build_protocol_request(request: Request) -> ProtocolRequest:
    """Create a ProtocolRequest from the incoming HTTP request. Never raises."""
    headers = dict(request.headers.items())
    content_type = headers.get("content-type", "")
    raw = await request.body()

    server = {
        REQUEST_METHOD: request.method.upper(),
        CONTENT_TYPE: content_type,
        REQUEST_URI: str(request.url),
        QUERY_STRING: request.url.query,
        REMOTE_ADDR: request.client.host if request.client else "",
    }

    # Seed headers with HTTP auth information
    credentials = parse_basic_auth(headers.get("authorization"))
    if credentials is not None:
        server[AUTH_USER], server[AUTH_PW] = credentials
        headers[AUTH_USER_HEADER] = server[AUTH_USER]
        headers[AUTH_PW_HEADER] = server[AUTH_PW]

    return ProtocolRequest(
        query=dict(request.query_params),
        request=await _parse_body(request, content_type, raw),
        server=server,
        headers=headers,
        content=raw.decode("utf-8", errors="replace"),
    )


def _passthrough_headers(response: ProtocolResponse) -> dict[str, str]:
    return {
        name: value
        for name, value in response.http_headers.items()
        if name.lower() not in ("content-type", "content-length")
    }


def to_http_response(response: ProtocolResponse) -> Response:
    """
    Convert the OAuth2 response into an HTTP response with a JSON content type.

    An empty body (e.g. a bare 401 challenge) is sent without a content type.
    """
    body = response.get_response_body()
    return Response(
        content=body,
        status_code=response.status_code,
        headers=_passthrough_headers(response),
        media_type="application/json" if body else None,
    )


def to_problem_response(response: ProtocolResponse) -> ApiProblemResponse:
    """Map the OAuth2 error fields of a response onto an API Problem."""
    problem = ApiProblem(
        status=response.status_code,
        detail=response.get_parameter("error_description"),
        type=response.get_parameter("error_uri"),
        title=response.get_parameter("error"),
    )
    # Challenge headers such as WWW-Authenticate are kept
    return ApiProblemResponse(problem, headers=_passthrough_headers(response))
