import logging
import threading

from oauth2_gateway.exceptions import ConfigurationError
from oauth2_gateway.server.oauth2_server import OAuth2Server
from oauth2_gateway.server.server_factory import ServerFactory

logger = logging.getLogger(__name__)


class ServerResolver:
    """
    Lazily builds and caches the OAuth2 server.

    The first ``resolve`` call invokes the factory with its ``server_type``;
    every later call returns that same instance whatever type it asks for.
    A failed construction is not cached, so it fails again on the next call.
    """

    def __init__(self, server_factory: ServerFactory):
        self.server_factory = server_factory
        self._server: OAuth2Server | None = None
        self._server_type: str | None = None
        self._lock = threading.Lock()

    def resolve(self, server_type: str | None = None) -> OAuth2Server:
        server = self._server
        if server is None:
            with self._lock:
                if self._server is None:
                    created = self._create(server_type)
                    # Type first: lock-free readers must never see the server without it
                    self._server_type = server_type
                    self._server = created
                server = self._server

        if server_type != self._server_type:
            # TODO: build one server per type once multi-engine deployments are confirmed
            logger.warning(
                f"OAuth2 server already created for type={self._server_type}; "
                f"ignoring requested type={server_type}"
            )
        return server

    def _create(self, server_type: str | None) -> OAuth2Server:
        try:
            server = self.server_factory.create(server_type)
        except ConfigurationError:
            logger.critical(f"OAuth2 server factory failed for type={server_type}")
            raise
        except Exception as e:
            logger.critical(f"OAuth2 server factory failed for type={server_type}: {e}")
            raise ConfigurationError(f"OAuth2 server factory raised an error: {e}") from e

        if not isinstance(server, OAuth2Server):
            logger.critical(f"OAuth2 server factory returned {type(server).__name__}")
            raise ConfigurationError(
                "OAuth2 server factory did not return a valid instance; "
                f"received {type(server).__name__}"
            )

        logger.info(f"Created OAuth2 server {type(server).__name__} for type={server_type}")
        return server
