"""Fixed set of known weather providers and default-provider lookup."""
import logging
from typing import List, Optional, Tuple, Type

import requests

from accuweather_provider import AccuWeatherProvider
from aerisweather_provider import AerisWeatherProvider
from credential_store import CredentialStore
from openweather_provider import OpenWeatherProvider
from weather_errors import NoDefaultConfigured, UnknownProvider
from weather_provider import DEFAULT_TIMEOUT, WeatherProviderBase
from weatherapi_provider import WeatherAPIProvider

# Declaration order is the listing order shown by "weather configure"
PROVIDERS: Tuple[Type[WeatherProviderBase], ...] = (
    OpenWeatherProvider,
    WeatherAPIProvider,
    AccuWeatherProvider,
    AerisWeatherProvider,
)


class ProviderRegistry:
    """Maps user-supplied provider names to configured provider clients."""

    def __init__(
        self,
        store: CredentialStore,
        session: Optional[requests.Session] = None,
        timeout: float = DEFAULT_TIMEOUT,
        providers: Tuple[Type[WeatherProviderBase], ...] = PROVIDERS,
    ):
        self.store = store
        self.session = session or requests.Session()
        self.timeout = timeout
        self._providers = providers

    def list(self) -> List[str]:
        return [provider.NAME for provider in self._providers]

    def canonical_name(self, name: str) -> str:
        """Return the declared spelling of a provider name (case-insensitive match)."""
        return self._lookup(name).NAME

    def resolve(self, name: Optional[str] = None) -> WeatherProviderBase:
        """
        Build the client for a named provider, or for the configured default.

        Raises:
            UnknownProvider: If name matches no known provider
            NoDefaultConfigured: If name is None and no default was ever set
        """
        if name is None:
            default = self.store.get_default()
            if not default:
                raise NoDefaultConfigured()
            logging.debug(f"Using default provider {default}")
            provider_cls = self._lookup(default)
        else:
            provider_cls = self._lookup(name)

        return provider_cls(
            api_key=self.store.get_credential(provider_cls.NAME),
            session=self.session,
            timeout=self.timeout,
        )

    def _lookup(self, name: str) -> Type[WeatherProviderBase]:
        wanted = name.strip().lower()
        for provider_cls in self._providers:
            if provider_cls.NAME.lower() == wanted:
                return provider_cls
        raise UnknownProvider(name)
