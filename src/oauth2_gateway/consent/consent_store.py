from abc import ABC, abstractmethod


class ConsentStore(ABC):
    """
    Per-session consent decisions, keyed by (session_id, client_id).

    At most one decision is held per pair; ``set`` overwrites. The session
    infrastructure owns the session lifetime; implementations must not keep
    decisions longer than the session they belong to.
    """

    @abstractmethod
    def get(self, session_id: str, client_id: str) -> bool | None:
        """Return the recorded decision, or None if the owner was never asked."""
        pass

    @abstractmethod
    def set(self, session_id: str, client_id: str, granted: bool) -> None:
        pass

    @abstractmethod
    def clear(self, session_id: str) -> None:
        """Forget every decision recorded for a session."""
        pass
