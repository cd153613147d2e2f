from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_USER_ID_PROVIDER_MODULE = "oauth2_gateway.user_id.request_user_id_provider"
DEFAULT_USER_ID_PROVIDER_CLASS = "RequestUserIdProvider"


class GatewaySettings(BaseSettings):
    """Gateway configuration with automatic env var loading.

    Every field is read from an ``OAUTH2_GW_`` prefixed variable, e.g.
    ``OAUTH2_GW_API_PROBLEM_ERROR_RESPONSE=false``.
    """

    model_config = SettingsConfigDict(
        env_prefix="OAUTH2_GW_",
        env_file=".env",
        extra="ignore",
    )

    # Error formatting: True returns API Problem bodies, False raw OAuth2 error bodies
    api_problem_error_response: bool = Field(
        True, description="Return application/problem+json instead of OAuth2 error bodies"
    )

    # OAuth2 server resolution
    server_type: str | None = Field(None, description="Selector passed to the server factory")
    server_factory_module: str | None = Field(None, description="Module of a custom ServerFactory")
    server_factory_class: str | None = Field(None, description="Class of a custom ServerFactory")
    request_validator_module: str | None = Field(
        None, description="Module of the oauthlib RequestValidator used by the default factory"
    )
    request_validator_class: str | None = Field(
        None, description="Class of the oauthlib RequestValidator used by the default factory"
    )
    token_expires_in: int = Field(3600, description="Access token lifetime in seconds")

    # Resource owner identity
    user_id_provider_module: str = Field(DEFAULT_USER_ID_PROVIDER_MODULE)
    user_id_provider_class: str = Field(DEFAULT_USER_ID_PROVIDER_CLASS)
    user_id_session_key: str = Field("user_id", description="Session key holding the user id")
    user_id_header: str = Field(
        "X-Authenticated-User", description="Trusted header holding the user id"
    )

    # Consent storage
    consent_store_module: str | None = Field(None, description="Module of a custom ConsentStore")
    consent_store_class: str | None = Field(None, description="Class of a custom ConsentStore")

    # Browser session
    session_secret_key: str | None = Field(None, description="Key used to sign the session cookie")
    session_cookie: str = Field("oauth2_session")
    session_max_age: int = Field(14 * 24 * 60 * 60, description="Session lifetime in seconds")
    session_https_only: bool = Field(False)

    # Redis (RedisConsentStore)
    redis_host: str = Field("localhost")
    redis_port: int = Field(6379)
    redis_db: int = Field(0)
    redis_pwd: str | None = Field(None)
    redis_ssl: bool = Field(False)

    log_level: str = Field("INFO")


@lru_cache
def get_settings() -> GatewaySettings:
    return GatewaySettings()
