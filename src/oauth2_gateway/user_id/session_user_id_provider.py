import logging

from fastapi import Request

from oauth2_gateway.configs import GatewaySettings, get_settings
from oauth2_gateway.exceptions import ConfigurationError, IdentityResolutionError
from oauth2_gateway.user_id.user_id_provider import UserIdProvider

logger = logging.getLogger(__name__)


class SessionUserIdProvider(UserIdProvider):
    """
    Reads the user id a login step stored in the browser session.

    Requires Starlette's SessionMiddleware.
    """

    def __init__(self, settings: GatewaySettings | None = None):
        if settings is None:
            settings = get_settings()
        self.session_key = settings.user_id_session_key

    async def resolve(self, request: Request) -> str | None:
        if "session" not in request.scope:
            raise ConfigurationError("SessionUserIdProvider requires SessionMiddleware")

        user_id = request.session.get(self.session_key)
        if not user_id:
            logger.warning("No authenticated user found in session")
            raise IdentityResolutionError("No authenticated user in session")
        return str(user_id)
