from abc import ABC, abstractmethod

from fastapi import Request


class UserIdProvider(ABC):
    """Resolves the authenticated resource owner of an HTTP request."""

    @abstractmethod
    async def resolve(self, request: Request) -> str | None:
        """
        Return the resource owner identifier passed on to the OAuth2 server.

        Raises:
            IdentityResolutionError: If the resource owner cannot be identified
        """
        pass
