from oauth2_gateway.server.oauth2_server import OAuth2Server
from oauth2_gateway.server.server_factory import (
    CallableServerFactory,
    OAuthlibServerFactory,
    ServerFactory,
)
from oauth2_gateway.server.server_resolver import ServerResolver

__all__ = [
    "OAuth2Server",
    "ServerFactory",
    "CallableServerFactory",
    "OAuthlibServerFactory",
    "ServerResolver",
]
