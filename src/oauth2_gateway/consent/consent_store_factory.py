from oauth2_gateway.configs import GatewaySettings
from oauth2_gateway.consent.consent_store import ConsentStore
from oauth2_gateway.consent.in_memory_consent_store import InMemoryConsentStore
from oauth2_gateway.exceptions import ConfigurationError
from oauth2_gateway.module_loader import load_custom_class

"""
The ConsentStoreFactory is responsible for creating consent stores.

It retrieves the module and class names from settings for custom
implementations, and ensures the dynamically loaded class is a subclass of
ConsentStore. Falls back to InMemoryConsentStore when no custom module is
provided.
"""


class ConsentStoreFactory:
    def __init__(self, settings: GatewaySettings):
        self.settings = settings

        module_name, class_name = self._get_custom_consent_store_config()
        if module_name and class_name:
            try:
                self.store_class = load_custom_class(module_name, class_name, ConsentStore)
            except (ImportError, ValueError, TypeError) as e:
                raise ConfigurationError(f"Unable to load consent store: {e}") from e
        else:
            self.store_class = None

    def get_consent_store(self) -> ConsentStore:
        if self.store_class is None:
            return InMemoryConsentStore()
        try:
            return self.store_class(settings=self.settings)
        except TypeError:
            # Fallback if settings not accepted
            return self.store_class()

    def _get_custom_consent_store_config(self) -> tuple[str | None, str | None]:
        module_name = self.settings.consent_store_module
        class_name = self.settings.consent_store_class
        if module_name and not class_name:
            raise ConfigurationError("Custom consent store class name not provided")
        return module_name, class_name
