"""
Gateway error kinds.

Protocol-level outcomes (ValidationError, EngineVerificationFailure) carry the
engine's ProtocolResponse and are always rendered through the adapter's error
builders. ConfigurationError and IdentityResolutionError are defects: the
first aborts request processing, the second is masked from the client.
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from oauth2_gateway.protocol.response import ProtocolResponse


class OAuth2GatewayError(Exception):
    """Base class for all gateway errors."""


class ConfigurationError(OAuth2GatewayError):
    """A deployment or configuration defect (never retried)."""


class IdentityResolutionError(OAuth2GatewayError):
    """The resource owner could not be identified for the current request."""


class ProtocolError(OAuth2GatewayError):
    """An OAuth2 outcome that must be returned to the client."""

    def __init__(self, response: "ProtocolResponse", message: str | None = None):
        self.response = response
        error = response.get_parameter("error")
        super().__init__(message or error or "OAuth2 request rejected")


class ValidationError(ProtocolError):
    """Malformed or unauthorized authorize/token request."""


class EngineVerificationFailure(ProtocolError):
    """Resource request rejected by the OAuth2 engine."""
