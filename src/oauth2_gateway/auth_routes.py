import logging

from fastapi import APIRouter, HTTPException, Request, status
from fastapi.responses import Response

from oauth2_gateway.auth_controller import AuthController
from oauth2_gateway.exceptions import ConfigurationError, IdentityResolutionError, ProtocolError

logger = logging.getLogger(__name__)


class AuthRoutes:
    """OAuth2 endpoints: token, test resource, authorize and code display."""

    def __init__(self, controller: AuthController):
        self.controller = controller

    def get_routes(self) -> APIRouter:
        """Create and return the OAuth2 routes."""
        router = APIRouter(prefix="/oauth", tags=["OAuth2"])
        controller = self.controller

        @router.api_route(
            "",
            methods=["POST", "OPTIONS"],
            summary="Token endpoint",
            description="Exchange an OAuth2 grant for an access token",
        )
        async def token(request: Request) -> Response:
            try:
                return await controller.token(request)
            except ProtocolError as e:
                return controller.get_error_response(e.response)
            except ConfigurationError:
                logger.critical("OAuth2 server is misconfigured")
                raise

        @router.api_route(
            "/resource",
            methods=["GET", "POST"],
            summary="Test resource",
            description="Succeeds only for requests carrying a valid access token",
        )
        async def resource(request: Request) -> Response:
            try:
                return await controller.resource(request)
            except ProtocolError as e:
                return controller.get_error_response(e.response)
            except ConfigurationError:
                logger.critical("OAuth2 server is misconfigured")
                raise

        @router.api_route(
            "/authorize",
            methods=["GET", "POST"],
            summary="Authorize endpoint",
            description="Ask the resource owner for consent and redirect back to the client",
        )
        async def authorize(request: Request) -> Response:
            try:
                return await controller.authorize(request)
            except ProtocolError as e:
                return controller.get_error_response(e.response)
            except IdentityResolutionError as e:
                logger.error(f"Unable to identify resource owner: {e}")
                raise HTTPException(
                    status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                    detail="Unable to complete the authorization request",
                ) from e
            except ConfigurationError:
                logger.critical("OAuth2 server is misconfigured")
                raise

        @router.get(
            "/receivecode",
            summary="Receive code",
            description="Display the authorization code returned to the redirect URI",
        )
        async def receive_code(request: Request) -> Response:
            return await controller.receive_code(request)

        return router
