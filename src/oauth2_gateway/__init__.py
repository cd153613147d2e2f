"""
OAuth2 Gateway

HTTP boundary layer of an OAuth2 authorization server. It translates HTTP
requests into protocol-neutral OAuth2 requests, drives the OAuth2 server for
token issuance, resource verification and the interactive consent flow, and
translates the results back into HTTP (raw OAuth2 bodies or API Problem
documents).

Components:
- adapter / protocol: HTTP <-> ProtocolRequest/ProtocolResponse
- server: OAuth2Server interface, factories, resolver, oauthlib binding
- user_id: resource owner identity providers
- consent: per-session consent decision stores
- authorization_flow: the authorize state machine
- auth_controller / auth_routes: FastAPI endpoints
- app: application factory
"""

__all__ = [
    "create_app",
    "AuthController",
    "GatewaySettings",
    "ProtocolRequest",
    "ProtocolResponse",
]


# Lazy imports to avoid circular dependencies
def __getattr__(name: str):
    if name == "create_app":
        from oauth2_gateway.app import create_app
        return create_app
    elif name == "AuthController":
        from oauth2_gateway.auth_controller import AuthController
        return AuthController
    elif name == "GatewaySettings":
        from oauth2_gateway.configs import GatewaySettings
        return GatewaySettings
    elif name in ("ProtocolRequest", "ProtocolResponse"):
        from oauth2_gateway import protocol
        return getattr(protocol, name)

    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
