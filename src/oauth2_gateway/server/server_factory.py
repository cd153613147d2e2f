"""
Server factories

A ServerFactory builds the OAuth2Server selected by an opaque "type" string.
The ServerFactoryLoader picks the factory from configuration:

- a custom ServerFactory class (OAUTH2_GW_SERVER_FACTORY_MODULE/_CLASS), or
- the oauthlib factory around a configured RequestValidator
  (OAUTH2_GW_REQUEST_VALIDATOR_MODULE/_CLASS).
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable

from oauthlib.oauth2 import RequestValidator, Server

from oauth2_gateway.configs import GatewaySettings
from oauth2_gateway.exceptions import ConfigurationError
from oauth2_gateway.module_loader import load_custom_class
from oauth2_gateway.server.oauth2_server import OAuth2Server
from oauth2_gateway.server.oauthlib_server import OAuthlibServer

logger = logging.getLogger(__name__)


class ServerFactory(ABC):
    @abstractmethod
    def create(self, server_type: str | None) -> OAuth2Server:
        """Build the OAuth2 server for the given selector."""
        pass


class CallableServerFactory(ServerFactory):
    """Adapts a plain ``callable(server_type) -> OAuth2Server``."""

    def __init__(self, factory: Callable[[str | None], OAuth2Server]):
        if not callable(factory):
            raise ConfigurationError(
                f"OAuth2 server factory must be callable; received {type(factory).__name__}"
            )
        self.factory = factory

    def create(self, server_type: str | None) -> OAuth2Server:
        return self.factory(server_type)


class OAuthlibServerFactory(ServerFactory):
    def __init__(self, request_validator: RequestValidator, token_expires_in: int = 3600):
        self.request_validator = request_validator
        self.token_expires_in = token_expires_in

    def create(self, server_type: str | None) -> OAuth2Server:
        logger.info(f"Creating oauthlib server for type={server_type}")
        server = Server(self.request_validator, token_expires_in=self.token_expires_in)
        return OAuthlibServer(server)


class ServerFactoryLoader:
    def __init__(self, settings: GatewaySettings):
        self.settings = settings

    def get_server_factory(self) -> ServerFactory:
        settings = self.settings
        try:
            if settings.server_factory_module and settings.server_factory_class:
                factory_class = load_custom_class(
                    settings.server_factory_module, settings.server_factory_class, ServerFactory
                )
                try:
                    return factory_class(settings=settings)
                except TypeError:
                    # Fallback if settings not accepted
                    return factory_class()

            if settings.request_validator_module and settings.request_validator_class:
                validator_class = load_custom_class(
                    settings.request_validator_module,
                    settings.request_validator_class,
                    RequestValidator,
                )
                return OAuthlibServerFactory(validator_class(), settings.token_expires_in)
        except (ImportError, ValueError, TypeError) as e:
            raise ConfigurationError(f"Unable to load OAuth2 server factory: {e}") from e

        raise ConfigurationError(
            "No OAuth2 server configured: set OAUTH2_GW_SERVER_FACTORY_MODULE/_CLASS "
            "or OAUTH2_GW_REQUEST_VALIDATOR_MODULE/_CLASS"
        )
