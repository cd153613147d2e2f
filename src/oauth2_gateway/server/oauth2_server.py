from abc import ABC, abstractmethod

from oauth2_gateway.protocol.request import ProtocolRequest
from oauth2_gateway.protocol.response import ProtocolResponse


class OAuth2Server(ABC):
    """
    The OAuth2 protocol engine the gateway drives.

    Implementations own grant validation, code and token generation and token
    verification. Every operation records its outcome on a ProtocolResponse.
    """

    @abstractmethod
    def validate_authorize_request(
        self, request: ProtocolRequest, response: ProtocolResponse
    ) -> bool:
        """Check client id, redirect URI, scope and response type of an authorize request."""
        pass

    @abstractmethod
    def handle_authorize_request(
        self,
        request: ProtocolRequest,
        response: ProtocolResponse,
        is_authorized: bool,
        user_id: str | None = None,
    ) -> ProtocolResponse:
        """Complete an authorize request; a redirect Location is set on grant and on denial."""
        pass

    @abstractmethod
    def handle_token_request(
        self, request: ProtocolRequest, response: ProtocolResponse | None = None
    ) -> ProtocolResponse:
        pass

    @abstractmethod
    def verify_resource_request(
        self,
        request: ProtocolRequest,
        response: ProtocolResponse | None = None,
        scope: str | None = None,
    ) -> bool:
        pass

    @abstractmethod
    def get_response(self) -> ProtocolResponse:
        """The response populated by the last operation."""
        pass
