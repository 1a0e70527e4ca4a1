"""Weather service tying provider selection, fetching and date resolution together."""
import logging
import time
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from date_resolver import resolve_nearest
from provider_registry import ProviderRegistry
from weather_data import Coordinate, ForecastEntry


@dataclass(frozen=True)
class WeatherReport:
    """Everything the formatter needs to show one resolved forecast."""
    provider: str
    address: str
    coordinate: Coordinate
    target: datetime
    target_is_now: bool
    entry: ForecastEntry
    elapsed_ms: int


class WeatherService:
    """
    Runs one "get" request against exactly one provider.

    One geocode call, one forecast fetch, no caching and no retries:
    any provider error propagates to the caller untouched.
    """

    def __init__(self, registry: ProviderRegistry):
        self.registry = registry

    def get_weather(
        self,
        address: str,
        target: datetime,
        provider_name: Optional[str] = None,
        target_is_now: bool = False,
    ) -> WeatherReport:
        """
        Resolve the provider, geocode the address and pick the nearest forecast.

        Raises:
            WeatherError: Any registry, provider or resolver failure
        """
        # Provider resolution happens before any network I/O
        provider = self.registry.resolve(provider_name)
        logging.info(f"Fetching weather for {address!r} from {provider.name}")

        started = time.monotonic()
        coordinate = provider.geocode(address)
        series = provider.fetch_forecast(coordinate)
        entry = resolve_nearest(series, target)
        elapsed_ms = int((time.monotonic() - started) * 1000)

        logging.info(f"{provider.name} returned {len(series)} entries in {elapsed_ms} ms; using {entry.timestamp.isoformat()}")
        return WeatherReport(
            provider=provider.name,
            address=address,
            coordinate=coordinate,
            target=target,
            target_is_now=target_is_now,
            entry=entry,
            elapsed_ms=elapsed_ms,
        )
