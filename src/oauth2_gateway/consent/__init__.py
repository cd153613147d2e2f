from oauth2_gateway.consent.consent_store import ConsentStore
from oauth2_gateway.consent.in_memory_consent_store import InMemoryConsentStore
from oauth2_gateway.consent.session import get_session_id

__all__ = ["ConsentStore", "InMemoryConsentStore", "get_session_id"]
