"""Weather domain model - pure data structures independent of any API."""
from dataclasses import dataclass, field
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Iterable, Iterator, Mapping, Optional, Tuple

from weather_errors import NoForecastData


@dataclass(frozen=True)
class Coordinate:
    """Geographic position resolved from a free-text address."""
    latitude: float
    longitude: float
    display_name: Optional[str] = None

    def query(self) -> str:
        """Return the "lat,lon" pair used by most provider URLs."""
        return f"{self.latitude},{self.longitude}"


@dataclass(frozen=True)
class ForecastEntry:
    """
    One timestamped forecast point, normalized across providers.

    Units: Celsius, hPa, percent, metre/second, millimetre, metre.
    Every parameter may be None when the provider does not report it.
    """
    timestamp: datetime  # timezone-aware
    condition: Optional[str] = None  # e.g. "Clouds", "Light rain"
    temperature: Optional[float] = None
    feels_like: Optional[float] = None
    temperature_min: Optional[float] = None
    temperature_max: Optional[float] = None
    pressure: Optional[float] = None
    humidity: Optional[float] = None
    wind_speed: Optional[float] = None
    wind_degrees: Optional[int] = None
    wind_gust: Optional[float] = None
    precipitation: Optional[float] = None
    rain: Optional[float] = None
    snow: Optional[float] = None
    rain_probability: Optional[float] = None
    snow_probability: Optional[float] = None
    cloud_cover: Optional[float] = None
    visibility: Optional[float] = None
    uv_index: Optional[float] = None
    sunrise: Optional[datetime] = None
    sunset: Optional[datetime] = None
    # Provider specific values that have no common column, e.g. dew point
    extras: Mapping[str, object] = field(default_factory=dict)

    def __post_init__(self):
        if self.timestamp.tzinfo is None:
            raise ValueError("ForecastEntry.timestamp must be timezone-aware")
        object.__setattr__(self, "extras", MappingProxyType(dict(self.extras)))


class ForecastSeries:
    """
    Immutable, non-empty sequence of forecast entries in ascending time order.

    Built fresh for every request; raises NoForecastData when a provider
    hands over nothing usable.
    """

    def __init__(self, entries: Iterable[ForecastEntry], provider: str = ""):
        ordered = tuple(sorted(entries, key=lambda entry: entry.timestamp))
        if not ordered:
            raise NoForecastData(
                f"The {provider or 'weather'} server did not provide weather forecast data"
            )
        self._entries: Tuple[ForecastEntry, ...] = ordered
        self.provider = provider

    @property
    def entries(self) -> Tuple[ForecastEntry, ...]:
        return self._entries

    def __iter__(self) -> Iterator[ForecastEntry]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __getitem__(self, index: int) -> ForecastEntry:
        return self._entries[index]

    def __repr__(self) -> str:
        return (
            f"ForecastSeries(provider={self.provider!r}, entries={len(self)}, "
            f"first={self._entries[0].timestamp.isoformat()}, "
            f"last={self._entries[-1].timestamp.isoformat()})"
        )


def from_epoch(value) -> Optional[datetime]:
    """Convert a UNIX timestamp to an aware UTC datetime, or None."""
    if value is None or isinstance(value, bool):
        return None
    try:
        return datetime.fromtimestamp(int(value), tz=timezone.utc)
    except (TypeError, ValueError, OverflowError, OSError):
        return None
