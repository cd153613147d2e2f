import logging

from fastapi import Request
from fastapi.responses import JSONResponse, RedirectResponse, Response
from fastapi.templating import Jinja2Templates
from starlette.concurrency import run_in_threadpool

from oauth2_gateway.adapter import build_protocol_request, to_http_response, to_problem_response
from oauth2_gateway.api_problem import ApiProblemResponse
from oauth2_gateway.authorization_flow import AuthorizationFlow, AuthorizeState
from oauth2_gateway.consent.consent_store import ConsentStore
from oauth2_gateway.consent.session import get_session_id
from oauth2_gateway.exceptions import EngineVerificationFailure, ValidationError
from oauth2_gateway.protocol.response import ProtocolResponse
from oauth2_gateway.server.oauth2_server import OAuth2Server
from oauth2_gateway.server.server_factory import ServerFactory
from oauth2_gateway.server.server_resolver import ServerResolver
from oauth2_gateway.user_id.user_id_provider import UserIdProvider

logger = logging.getLogger(__name__)

AUTHORIZE_TEMPLATE = "oauth/authorize.html"
RECEIVE_CODE_TEMPLATE = "oauth/receive_code.html"


class AuthController:
    """
    Drives the OAuth2 server for the token, resource and authorize endpoints.

    Rejected protocol requests are raised as ProtocolError subclasses carrying
    the server's response; ``get_error_response`` renders them according to
    the configured error format.
    """

    def __init__(
        self,
        server_factory: ServerFactory,
        user_id_provider: UserIdProvider,
        consent_store: ConsentStore,
        templates: Jinja2Templates,
        api_problem_error_response: bool = True,
        server_type: str | None = None,
    ):
        self.server_resolver = ServerResolver(server_factory)
        self.user_id_provider = user_id_provider
        self.consent_store = consent_store
        self.templates = templates
        self.api_problem_error_response = api_problem_error_response
        self.server_type = server_type

    def is_api_problem_error_response(self) -> bool:
        return self.api_problem_error_response

    def set_api_problem_error_response(self, api_problem_error_response: bool) -> None:
        """
        Indicate whether API Problem or OAuth2 errors should be returned.

        True (the default) returns application/problem+json bodies, False
        returns error bodies as defined by RFC 6749.
        """
        self.api_problem_error_response = bool(api_problem_error_response)

    def get_oauth2_server(self) -> OAuth2Server:
        return self.server_resolver.resolve(self.server_type)

    async def token(self, request: Request) -> Response:
        if request.method == "OPTIONS":
            # Most likely a CORS preflight; pass the response on
            return Response(status_code=200)

        protocol_request = await build_protocol_request(request)
        server = self.get_oauth2_server()
        response = await run_in_threadpool(server.handle_token_request, protocol_request)

        if response.is_client_error():
            logger.warning(f"Token request rejected: {response.get_parameter('error')}")
            raise ValidationError(response)

        return to_http_response(response)

    async def resource(self, request: Request) -> Response:
        protocol_request = await build_protocol_request(request)
        server = self.get_oauth2_server()
        response = ProtocolResponse()

        is_valid = await run_in_threadpool(
            server.verify_resource_request, protocol_request, response
        )
        if not is_valid:
            raise EngineVerificationFailure(response)

        return JSONResponse(
            status_code=200,
            content={"success": True, "message": "You accessed my APIs!"},
        )

    async def authorize(self, request: Request) -> Response:
        server = self.get_oauth2_server()
        protocol_request = await build_protocol_request(request)
        session_id = get_session_id(request)

        flow = AuthorizationFlow(server, self.consent_store, self.user_id_provider)
        result = await flow.run(request, protocol_request, session_id)

        if result.state == AuthorizeState.AWAITING_CONSENT:
            return self.templates.TemplateResponse(
                request, AUTHORIZE_TEMPLATE, {"client_id": result.client_id}
            )

        if result.state == AuthorizeState.COMPLETED:
            return RedirectResponse(result.redirect_url, status_code=302)

        raise ValidationError(result.response)

    async def receive_code(self, request: Request) -> Response:
        """Display-only page echoing the authorization code."""
        code = request.query_params.get("code")
        return self.templates.TemplateResponse(request, RECEIVE_CODE_TEMPLATE, {"code": code})

    def get_error_response(self, response: ProtocolResponse) -> Response:
        if self.is_api_problem_error_response():
            return self.get_api_problem_response(response)
        return to_http_response(response)

    @staticmethod
    def get_api_problem_response(response: ProtocolResponse) -> ApiProblemResponse:
        return to_problem_response(response)
