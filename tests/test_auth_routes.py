from urllib.parse import parse_qs, urlsplit

import pytest
from fastapi.testclient import TestClient

from fakes import ACCESS_TOKEN, AUTH_CODE, CLIENT_ID, CLIENT_SECRET, REDIRECT_URI
from oauth2_gateway.api_problem import DEFAULT_PROBLEM_TYPE, PROBLEM_MEDIA_TYPE
from oauth2_gateway.app import create_app
from oauth2_gateway.configs import GatewaySettings
from oauth2_gateway.exceptions import ConfigurationError
from oauth2_gateway.server.server_factory import CallableServerFactory
from oauth2_gateway.user_id.header_user_id_provider import HeaderUserIdProvider

AUTHORIZE_URL = f"/oauth/authorize?client_id={CLIENT_ID}&response_type=code&state=xyz"


def redirect_params(response) -> dict:
    location = urlsplit(response.headers["location"])
    assert f"{location.scheme}://{location.netloc}{location.path}" == REDIRECT_URI
    return parse_qs(location.query)


class TestAuthorizeEndpoint:
    """Test the consent prompt and the redirects back to the client."""

    def test_first_visit_shows_prompt(self, client, fake_server):
        response = client.get(AUTHORIZE_URL)

        assert response.status_code == 200
        assert "text/html" in response.headers["content-type"]
        assert CLIENT_ID in response.text
        assert 'name="authorized"' in response.text
        assert fake_server.authorize_calls == []

    def test_approval_redirects_with_code(self, client, fake_server):
        response = client.post(
            AUTHORIZE_URL + "&user_id=alice",
            data={"authorized": "yes"},
            follow_redirects=False,
        )

        assert response.status_code == 302
        assert redirect_params(response) == {"code": [AUTH_CODE], "state": ["xyz"]}
        assert fake_server.authorize_calls == [(True, "alice")]

    def test_decision_is_remembered_for_the_session(self, client, fake_server):
        client.post(AUTHORIZE_URL, data={"authorized": "yes"}, follow_redirects=False)

        response = client.get(AUTHORIZE_URL, follow_redirects=False)

        assert response.status_code == 302
        assert redirect_params(response)["code"] == [AUTH_CODE]
        assert len(fake_server.authorize_calls) == 2

    def test_other_session_is_prompted_again(self, app, client):
        client.post(AUTHORIZE_URL, data={"authorized": "yes"}, follow_redirects=False)

        response = TestClient(app).get(AUTHORIZE_URL, follow_redirects=False)

        assert response.status_code == 200
        assert CLIENT_ID in response.text

    @pytest.mark.parametrize("data", [{"authorized": "no"}, {}])
    def test_anything_but_yes_is_denied(self, client, data):
        response = client.post(AUTHORIZE_URL, data=data, follow_redirects=False)

        assert response.status_code == 302
        params = redirect_params(response)
        assert params["error"] == ["access_denied"]
        assert params["state"] == ["xyz"]
        assert "code" not in params

    def test_invalid_client_returns_problem(self, client):
        response = client.get("/oauth/authorize?client_id=unknown&response_type=code")

        assert response.status_code == 400
        assert response.headers["content-type"] == PROBLEM_MEDIA_TYPE
        assert response.json() == {
            "type": DEFAULT_PROBLEM_TYPE,
            "title": "invalid_client",
            "status": 400,
            "detail": "The client id supplied is invalid",
        }

    def test_invalid_client_returns_oauth2_error(self, app, client):
        app.state.auth_controller.set_api_problem_error_response(False)

        response = client.get("/oauth/authorize?client_id=unknown&response_type=code")

        assert response.status_code == 400
        assert response.headers["content-type"] == "application/json"
        assert response.json() == {
            "error": "invalid_client",
            "error_description": "The client id supplied is invalid",
        }

    def test_identity_failure_is_masked(self, settings, fake_server):
        app = create_app(
            settings,
            server_factory=CallableServerFactory(lambda server_type: fake_server),
            user_id_provider=HeaderUserIdProvider(settings),
        )
        client = TestClient(app)

        response = client.post(AUTHORIZE_URL, data={"authorized": "yes"}, follow_redirects=False)

        assert response.status_code == 500
        assert response.json() == {"detail": "Unable to complete the authorization request"}
        assert fake_server.authorize_calls == []


class TestTokenEndpoint:
    def test_missing_grant_type(self, client):
        response = client.post("/oauth", data={}, auth=(CLIENT_ID, CLIENT_SECRET))

        assert response.status_code == 400
        assert response.headers["content-type"] == PROBLEM_MEDIA_TYPE
        body = response.json()
        assert body["title"] == "invalid_request"
        assert body["status"] == 400
        assert body["detail"] == "The grant type was not specified in the request"

    def test_form_request_with_basic_auth(self, client):
        response = client.post(
            "/oauth", data={"grant_type": "client_credentials"}, auth=(CLIENT_ID, CLIENT_SECRET)
        )

        assert response.status_code == 200
        assert response.headers["cache-control"] == "no-store"
        assert response.json() == {
            "access_token": ACCESS_TOKEN,
            "token_type": "Bearer",
            "expires_in": 3600,
        }

    def test_json_request_with_basic_auth(self, client):
        response = client.post(
            "/oauth", json={"grant_type": "client_credentials"}, auth=(CLIENT_ID, CLIENT_SECRET)
        )

        assert response.status_code == 200
        assert response.json()["access_token"] == ACCESS_TOKEN

    def test_bad_client_credentials(self, client):
        response = client.post(
            "/oauth", data={"grant_type": "client_credentials"}, auth=(CLIENT_ID, "wrong")
        )

        assert response.status_code == 400
        assert response.json()["title"] == "invalid_client"

    def test_options_passes_through(self, client, fake_server):
        response = client.options("/oauth")

        assert response.status_code == 200
        assert fake_server.token_calls == 0


class TestResourceEndpoint:
    def test_missing_token(self, client):
        response = client.get("/oauth/resource")

        assert response.status_code == 401
        assert response.headers["content-type"] == PROBLEM_MEDIA_TYPE
        assert response.json()["title"] == "invalid_token"

    def test_valid_token(self, client):
        response = client.post(
            "/oauth/resource", headers={"Authorization": f"Bearer {ACCESS_TOKEN}"}
        )

        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "You accessed my APIs!"}


class TestReceiveCode:
    def test_shows_code(self, client):
        response = client.get(f"/oauth/receivecode?code={AUTH_CODE}")

        assert response.status_code == 200
        assert AUTH_CODE in response.text

    def test_without_code(self, client):
        response = client.get("/oauth/receivecode")

        assert "No authorization code was received." in response.text


class TestMisconfiguration:
    """Test that configuration defects abort request processing."""

    def test_invalid_server_factory(self, settings):
        app = create_app(settings, server_factory=CallableServerFactory(lambda t: object()))
        client = TestClient(app)

        with pytest.raises(ConfigurationError):
            client.post("/oauth", data={"grant_type": "client_credentials"})

    def test_missing_session_secret(self, fake_server):
        settings = GatewaySettings(_env_file=None)

        with pytest.raises(ConfigurationError, match="SESSION_SECRET_KEY"):
            create_app(settings, server_factory=CallableServerFactory(lambda t: fake_server))

    def test_missing_server_configuration(self, settings):
        with pytest.raises(ConfigurationError, match="No OAuth2 server configured"):
            create_app(settings)
