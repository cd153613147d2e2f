import secrets

from fastapi import Request

from oauth2_gateway.exceptions import ConfigurationError

SESSION_ID_KEY = "oauth2_session_id"


def generate_session_id() -> str:
    """Cryptographically random, URL-safe session identifier (32 bytes)."""
    return secrets.token_urlsafe(32)


def get_session_id(request: Request) -> str:
    """
    Return the consent session identifier, creating it on first use.

    The identifier lives in the signed session cookie, so its lifetime is the
    browser session's.
    """
    if "session" not in request.scope:
        raise ConfigurationError("Consent tracking requires SessionMiddleware")

    session_id = request.session.get(SESSION_ID_KEY)
    if not session_id:
        session_id = generate_session_id()
        request.session[SESSION_ID_KEY] = session_id
    return session_id
