"""
Redis Consent Store

Keeps consent decisions in Redis so that several gateway workers share them.
Each session is one hash (``consent:{session_id}``) mapping client ids to
"1" (granted) or "0" (denied); the hash expires with the session.

To use this implementation, set the following environment variables:

OAUTH2_GW_CONSENT_STORE_MODULE=oauth2_gateway.consent.custom.example_redis_consent_store
OAUTH2_GW_CONSENT_STORE_CLASS=RedisConsentStore

Redis configuration environment variables:
- OAUTH2_GW_REDIS_HOST (default: localhost)
- OAUTH2_GW_REDIS_PORT (default: 6379)
- OAUTH2_GW_REDIS_DB (default: 0)
- OAUTH2_GW_REDIS_PWD (optional)
- OAUTH2_GW_REDIS_SSL (default: false)
- OAUTH2_GW_SESSION_MAX_AGE (key TTL, default: 14 days)
"""

import redis

from oauth2_gateway.configs import GatewaySettings, get_settings
from oauth2_gateway.consent.consent_store import ConsentStore

GRANTED = "1"
DENIED = "0"


class RedisConsentStore(ConsentStore):
    def __init__(self, settings: GatewaySettings | None = None):
        """
        Initialize the Redis-based consent store.

        Args:
            settings: Gateway settings. If None, they are read from the environment.
        """
        if settings is None:
            settings = get_settings()

        self.settings = settings
        self.ttl = settings.session_max_age

        self.redis_client = redis.Redis(
            host=settings.redis_host,
            port=settings.redis_port,
            db=settings.redis_db,
            password=settings.redis_pwd,
            ssl=settings.redis_ssl,
            decode_responses=True,
            socket_connect_timeout=5,
            socket_timeout=5,
            retry_on_timeout=True,
        )

        # Test connection
        try:
            self.redis_client.ping()
        except redis.ConnectionError as e:
            raise ConnectionError(f"Failed to connect to Redis: {e}") from e

    def _get_redis_key(self, session_id: str) -> str:
        return f"consent:{session_id}"

    def get(self, session_id: str, client_id: str) -> bool | None:
        try:
            value = self.redis_client.hget(self._get_redis_key(session_id), client_id)
        except redis.RedisError as e:
            raise RuntimeError(f"Failed to read consent from Redis: {e}") from e

        if value is None:
            return None
        return value == GRANTED

    def set(self, session_id: str, client_id: str, granted: bool) -> None:
        redis_key = self._get_redis_key(session_id)
        try:
            pipeline = self.redis_client.pipeline()
            pipeline.hset(redis_key, client_id, GRANTED if granted else DENIED)
            pipeline.expire(redis_key, self.ttl)
            pipeline.execute()
        except redis.RedisError as e:
            raise RuntimeError(f"Failed to store consent in Redis: {e}") from e

    def clear(self, session_id: str) -> None:
        try:
            self.redis_client.delete(self._get_redis_key(session_id))
        except redis.RedisError as e:
            raise RuntimeError(f"Failed to clear consent in Redis: {e}") from e
