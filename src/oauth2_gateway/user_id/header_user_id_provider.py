from fastapi import Request

from oauth2_gateway.configs import GatewaySettings, get_settings
from oauth2_gateway.exceptions import IdentityResolutionError
from oauth2_gateway.user_id.user_id_provider import UserIdProvider


class HeaderUserIdProvider(UserIdProvider):
    """Trusts a header set by an authenticating reverse proxy."""

    def __init__(self, settings: GatewaySettings | None = None):
        if settings is None:
            settings = get_settings()
        self.header_name = settings.user_id_header

    async def resolve(self, request: Request) -> str | None:
        user_id = request.headers.get(self.header_name)
        if not user_id:
            raise IdentityResolutionError(f"Missing {self.header_name} header")
        return user_id
