"""
Authorization consent flow

One authorize attempt walks the states

    RECEIVED_REQUEST -> VALIDATED -> AWAITING_CONSENT -> DECIDED -> COMPLETED

with ERRORED reachable from any non-terminal state. Nothing is suspended
between HTTP calls: every browser round trip re-runs the flow and rebuilds its
state from the session (consent store) and the request.

Consent decisions are remembered per (session, client): once the owner has
answered for a client, later authorize requests for that client in the same
session skip the prompt.
"""

import logging
from enum import Enum

from fastapi import Request
from starlette.concurrency import run_in_threadpool

from oauth2_gateway.consent.consent_store import ConsentStore
from oauth2_gateway.exceptions import ConfigurationError, IdentityResolutionError
from oauth2_gateway.protocol.request import ProtocolRequest
from oauth2_gateway.protocol.response import ProtocolResponse
from oauth2_gateway.server.oauth2_server import OAuth2Server
from oauth2_gateway.user_id.user_id_provider import UserIdProvider

logger = logging.getLogger(__name__)

AUTHORIZED_FIELD = "authorized"
APPROVED = "yes"


class AuthorizeState(str, Enum):
    RECEIVED_REQUEST = "received_request"
    VALIDATED = "validated"
    AWAITING_CONSENT = "awaiting_consent"
    DECIDED = "decided"
    COMPLETED = "completed"
    ERRORED = "errored"


class AuthorizeResult:
    """Where an authorize attempt stopped, and what to send back."""

    def __init__(
        self,
        state: AuthorizeState,
        response: ProtocolResponse,
        client_id: str | None = None,
        is_authorized: bool | None = None,
        redirect_url: str | None = None,
    ):
        self.state = state
        self.response = response
        self.client_id = client_id
        self.is_authorized = is_authorized
        self.redirect_url = redirect_url

    def __repr__(self) -> str:
        return f"AuthorizeResult(state={self.state.value}, client_id={self.client_id})"


class AuthorizationFlow:
    def __init__(
        self,
        server: OAuth2Server,
        consent_store: ConsentStore,
        user_id_provider: UserIdProvider,
    ):
        self.server = server
        self.consent_store = consent_store
        self.user_id_provider = user_id_provider

    @staticmethod
    def _enter(state: AuthorizeState, client_id: str | None = None) -> AuthorizeState:
        logger.debug(f"Authorize flow -> {state.value} (client_id={client_id})")
        return state

    async def run(
        self, http_request: Request, request: ProtocolRequest, session_id: str
    ) -> AuthorizeResult:
        """
        Run one authorize attempt.

        Args:
            http_request: The inbound HTTP request (handed to the identity provider)
            request: The same request as a ProtocolRequest
            session_id: Identifier of the browser session owning the consent decisions

        Returns:
            AuthorizeResult: AWAITING_CONSENT when the prompt must be shown,
            COMPLETED with a redirect URL, or ERRORED with the server's response

        Raises:
            IdentityResolutionError: If the resource owner cannot be identified
        """
        self._enter(AuthorizeState.RECEIVED_REQUEST)
        response = ProtocolResponse()

        is_valid = await run_in_threadpool(
            self.server.validate_authorize_request, request, response
        )
        client_id = request.get_query("client_id") or request.get_request("client_id")
        if not is_valid:
            logger.warning(f"Invalid authorize request for client_id={client_id}")
            state = self._enter(AuthorizeState.ERRORED, client_id)
            return AuthorizeResult(state, response, client_id)

        self._enter(AuthorizeState.VALIDATED, client_id)

        # A consent submission overwrites the decision before it is read back
        if request.method == "POST":
            granted = request.get_request(AUTHORIZED_FIELD) == APPROVED
            self.consent_store.set(session_id, client_id, granted)
            logger.info(f"Recorded consent decision granted={granted} for client_id={client_id}")

        is_authorized = self.consent_store.get(session_id, client_id)
        if is_authorized is None:
            state = self._enter(AuthorizeState.AWAITING_CONSENT, client_id)
            return AuthorizeResult(state, response, client_id)

        self._enter(AuthorizeState.DECIDED, client_id)
        user_id = await self._resolve_user_id(http_request)

        response = await run_in_threadpool(
            self.server.handle_authorize_request, request, response, is_authorized, user_id
        )
        redirect = response.get_http_header("Location")
        if not redirect:
            logger.warning(f"OAuth2 server returned no redirect for client_id={client_id}")
            state = self._enter(AuthorizeState.ERRORED, client_id)
            return AuthorizeResult(state, response, client_id, is_authorized)

        logger.info(f"Authorize request completed for client_id={client_id}")
        state = self._enter(AuthorizeState.COMPLETED, client_id)
        return AuthorizeResult(state, response, client_id, is_authorized, redirect)

    async def _resolve_user_id(self, http_request: Request) -> str | None:
        try:
            return await self.user_id_provider.resolve(http_request)
        except (IdentityResolutionError, ConfigurationError):
            raise
        except Exception as e:
            raise IdentityResolutionError(f"User id provider failed: {e}") from e
