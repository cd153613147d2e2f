from oauth2_gateway.configs import GatewaySettings
from oauth2_gateway.exceptions import ConfigurationError
from oauth2_gateway.module_loader import load_custom_class
from oauth2_gateway.user_id.user_id_provider import UserIdProvider

"""
The UserIdProviderFactory creates the configured UserIdProvider.

The module and class names come from OAUTH2_GW_USER_ID_PROVIDER_MODULE and
OAUTH2_GW_USER_ID_PROVIDER_CLASS; the default reads ``user_id`` from the
request.
"""


class UserIdProviderFactory:
    def __init__(self, settings: GatewaySettings):
        self.settings = settings
        try:
            self.provider_class = load_custom_class(
                settings.user_id_provider_module,
                settings.user_id_provider_class,
                UserIdProvider,
            )
        except (ImportError, ValueError, TypeError) as e:
            raise ConfigurationError(f"Unable to load user id provider: {e}") from e

    def get_user_id_provider(self) -> UserIdProvider:
        try:
            return self.provider_class(settings=self.settings)
        except TypeError:
            # Fallback if settings not accepted
            return self.provider_class()
