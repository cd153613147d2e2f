import threading

from oauth2_gateway.consent.consent_store import ConsentStore


class InMemoryConsentStore(ConsentStore):
    def __init__(self):
        self._decisions: dict[str, dict[str, bool]] = {}
        self._lock = threading.Lock()

    def get(self, session_id: str, client_id: str) -> bool | None:
        with self._lock:
            return self._decisions.get(session_id, {}).get(client_id)

    def set(self, session_id: str, client_id: str, granted: bool) -> None:
        with self._lock:
            self._decisions.setdefault(session_id, {})[client_id] = bool(granted)

    def clear(self, session_id: str) -> None:
        with self._lock:
            self._decisions.pop(session_id, None)
