import base64
import json

import pytest

from oauth2_gateway.adapter import (
    build_protocol_request,
    parse_basic_auth,
    to_http_response,
    to_problem_response,
)
from oauth2_gateway.api_problem import DEFAULT_PROBLEM_TYPE, PROBLEM_MEDIA_TYPE
from oauth2_gateway.protocol.request import (
    AUTH_PW,
    AUTH_PW_HEADER,
    AUTH_USER,
    AUTH_USER_HEADER,
    CONTENT_TYPE,
    REQUEST_METHOD,
)
from oauth2_gateway.protocol.response import ProtocolResponse


def basic(username: str, password: str) -> str:
    token = base64.b64encode(f"{username}:{password}".encode()).decode()
    return f"Basic {token}"


class TestParseBasicAuth:
    def test_valid_credentials(self):
        assert parse_basic_auth(basic("client", "s3cr:et")) == ("client", "s3cr:et")

    @pytest.mark.parametrize(
        "header",
        [None, "", "Bearer abc", "Basic", "Basic !!not-base64!!", "Basic " + "bm9jb2xvbg=="],
    )
    def test_invalid_credentials(self, header):
        assert parse_basic_auth(header) is None


class TestBuildProtocolRequest:
    """Test marshalling of HTTP requests into ProtocolRequests."""

    @pytest.mark.asyncio
    async def test_basic_auth_without_body(self, make_request):
        request = make_request(
            method="POST",
            headers={"Authorization": basic("test-client", "test-secret")},
        )

        protocol_request = await build_protocol_request(request)

        assert protocol_request.request == {}
        assert protocol_request.get_header(AUTH_USER_HEADER) == "test-client"
        assert protocol_request.get_header(AUTH_PW_HEADER) == "test-secret"
        assert protocol_request.server[AUTH_USER] == "test-client"
        assert protocol_request.server[AUTH_PW] == "test-secret"
        assert protocol_request.server[REQUEST_METHOD] == "POST"

    @pytest.mark.asyncio
    async def test_query_and_headers(self, make_request):
        request = make_request(
            query_string="client_id=abc&state=xyz",
            headers={"X-Custom": "value"},
        )

        protocol_request = await build_protocol_request(request)

        assert protocol_request.query == {"client_id": "abc", "state": "xyz"}
        assert protocol_request.get_header("x-custom") == "value"
        assert protocol_request.get_header(AUTH_USER_HEADER) is None
        assert protocol_request.method == "GET"
        assert protocol_request.uri == "http://testserver/oauth?client_id=abc&state=xyz"

    @pytest.mark.asyncio
    async def test_json_body(self, make_request):
        body = json.dumps({"grant_type": "client_credentials", "scope": "read"}).encode()
        request = make_request(
            method="POST",
            headers={"Content-Type": "application/json"},
            body=body,
        )

        protocol_request = await build_protocol_request(request)

        assert protocol_request.request == {"grant_type": "client_credentials", "scope": "read"}
        assert protocol_request.server[CONTENT_TYPE] == "application/json"
        assert protocol_request.content == body.decode()

    @pytest.mark.asyncio
    async def test_form_body(self, make_request):
        request = make_request(
            method="POST",
            headers={"Content-Type": "application/x-www-form-urlencoded"},
            body=b"grant_type=authorization_code&code=abc",
        )

        protocol_request = await build_protocol_request(request)

        assert protocol_request.request == {"grant_type": "authorization_code", "code": "abc"}

    @pytest.mark.asyncio
    async def test_unparsable_body_falls_back_to_empty(self, make_request):
        request = make_request(
            method="POST",
            headers={"Content-Type": "application/json"},
            body=b"{not json",
        )

        protocol_request = await build_protocol_request(request)

        assert protocol_request.request == {}
        assert protocol_request.content == "{not json"

    @pytest.mark.asyncio
    async def test_json_array_body_is_ignored(self, make_request):
        request = make_request(
            method="POST", headers={"Content-Type": "application/json"}, body=b"[1, 2]"
        )

        protocol_request = await build_protocol_request(request)

        assert protocol_request.request == {}


class TestToHttpResponse:
    def test_copies_status_headers_and_body(self):
        response = ProtocolResponse(
            {"access_token": "abc"},
            status_code=200,
            headers={"Cache-Control": "no-store", "Content-Type": "text/plain"},
        )

        http_response = to_http_response(response)

        assert http_response.status_code == 200
        assert http_response.headers["cache-control"] == "no-store"
        assert http_response.headers["content-type"] == "application/json"
        assert json.loads(http_response.body) == {"access_token": "abc"}

    def test_error_response(self):
        response = ProtocolResponse()
        response.set_error(400, "invalid_request", "Missing grant type")

        http_response = to_http_response(response)

        assert http_response.status_code == 400
        assert json.loads(http_response.body) == {
            "error": "invalid_request",
            "error_description": "Missing grant type",
        }

    def test_empty_body_has_no_content_type(self):
        response = ProtocolResponse(status_code=401, headers={"WWW-Authenticate": "Bearer"})

        http_response = to_http_response(response)

        assert http_response.status_code == 401
        assert http_response.body == b""
        assert "content-type" not in http_response.headers
        assert http_response.headers["www-authenticate"] == "Bearer"


class TestToProblemResponse:
    def test_maps_error_fields(self):
        response = ProtocolResponse()
        response.set_error(400, "invalid_client", "Unknown client", "https://docs/invalid_client")

        problem_response = to_problem_response(response)

        assert problem_response.status_code == 400
        assert problem_response.headers["content-type"] == PROBLEM_MEDIA_TYPE
        assert json.loads(problem_response.body) == {
            "type": "https://docs/invalid_client",
            "title": "invalid_client",
            "status": 400,
            "detail": "Unknown client",
        }

    def test_missing_fields_use_defaults(self):
        response = ProtocolResponse(status_code=401)

        problem_response = to_problem_response(response)

        body = json.loads(problem_response.body)
        assert body == {"type": DEFAULT_PROBLEM_TYPE, "title": "Unauthorized", "status": 401}

    def test_challenge_header_is_kept(self):
        response = ProtocolResponse(status_code=401, headers={"WWW-Authenticate": "Bearer"})

        problem_response = to_problem_response(response)

        assert problem_response.headers["www-authenticate"] == "Bearer"
        assert problem_response.headers["content-type"] == PROBLEM_MEDIA_TYPE
