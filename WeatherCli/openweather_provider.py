"""OpenWeather 5 day / 3 hour forecast provider implementation."""
import logging
from typing import Any, Optional

import requests

from weather_data import Coordinate, ForecastEntry, ForecastSeries, from_epoch
from weather_errors import AddressNotFound, NoForecastData, TransportError
from weather_provider import DEFAULT_TIMEOUT, WeatherProviderBase, dig, safe_float, safe_int


class OpenWeatherProvider(WeatherProviderBase):
    """
    Weather provider using the OpenWeather free APIs.

    Geocoding: https://openweathermap.org/api/geocoding-api
    Forecast:  https://openweathermap.org/forecast5 (3-hour steps for 5 days)
    Neither endpoint requires a paid subscription.
    """

    NAME = "OpenWeather"
    GEOCODING_URL = "https://api.openweathermap.org/geo/1.0/direct"
    FORECAST_URL = "https://api.openweathermap.org/data/2.5/forecast"

    def __init__(
        self,
        api_key: Optional[str] = None,
        session: Optional[requests.Session] = None,
        timeout: float = DEFAULT_TIMEOUT,
        units: str = "metric",
        lang: str = "en",
    ):
        """
        Initialize OpenWeather provider.

        Args:
            api_key: OpenWeather API key
            session: HTTP session used for requests
            timeout: HTTP request timeout in seconds
            units: Temperature units ("metric", "imperial", or "standard")
            lang: Language code for descriptions (e.g., "en", "de")
        """
        super().__init__(api_key=api_key, session=session, timeout=timeout)
        self.units = units
        self.lang = lang

    def geocode(self, address: str) -> Coordinate:
        params = {"q": address, "limit": 1, "appid": self.require_key()}
        places = self._get_json(self.GEOCODING_URL, params=params)
        if not isinstance(places, list):
            raise TransportError("Unexpected geocoding response: expected a list of places")
        if not places:
            raise AddressNotFound(address)

        place = places[0]
        lat = safe_float(place.get("lat"))
        lon = safe_float(place.get("lon"))
        if lat is None or lon is None:
            raise TransportError("Geocoding response is missing coordinates")

        parts = [place.get("name"), place.get("state"), place.get("country")]
        display_name = ", ".join(p for p in parts if p) or None
        logging.info(f"OpenWeather geocoded {address!r} to {display_name} ({lat},{lon})")
        return Coordinate(latitude=lat, longitude=lon, display_name=display_name)

    def fetch_forecast(self, coordinate: Coordinate) -> ForecastSeries:
        params = {
            "lat": coordinate.latitude,
            "lon": coordinate.longitude,
            "appid": self.require_key(),
            "units": self.units,
            "lang": self.lang,
        }
        logging.debug(f"Request parameters: lat={coordinate.latitude}, lon={coordinate.longitude}, units={self.units}, lang={self.lang}")
        data = self._get_json(self.FORECAST_URL, params=params)

        items = dig(data, "list")
        if not isinstance(items, list) or not items:
            logging.error("Response missing 'list' array")
            raise NoForecastData("The OpenWeather server did not provide weather forecast data")

        # Sunrise and sunset live on the city block, not on each forecast item
        sunrise = from_epoch(dig(data, "city", "sunrise"))
        sunset = from_epoch(dig(data, "city", "sunset"))

        entries = []
        for item in items:
            entry = self._parse_item(item, sunrise, sunset)
            if entry is not None:
                entries.append(entry)

        logging.info(f"Parsed {len(entries)} OpenWeather forecast entries")
        return ForecastSeries(entries, provider=self.NAME)

    def _parse_item(self, item: Any, sunrise, sunset) -> Optional[ForecastEntry]:
        if not isinstance(item, dict):
            return None
        timestamp = from_epoch(item.get("dt"))
        if timestamp is None:
            logging.warning(f"Skipping OpenWeather item without a valid 'dt': {str(item)[:200]}")
            return None

        main_data = item.get("main") or {}
        wind_data = item.get("wind") or {}
        rain = safe_float(dig(item, "rain", "3h"))
        snow = safe_float(dig(item, "snow", "3h"))
        precipitation = None
        if rain is not None or snow is not None:
            precipitation = (rain or 0.0) + (snow or 0.0)
        pop = safe_float(item.get("pop"))
        description = dig(item, "weather", 0, "description")

        return ForecastEntry(
            timestamp=timestamp,
            condition=dig(item, "weather", 0, "main"),
            temperature=safe_float(main_data.get("temp")),
            feels_like=safe_float(main_data.get("feels_like")),
            temperature_min=safe_float(main_data.get("temp_min")),
            temperature_max=safe_float(main_data.get("temp_max")),
            pressure=safe_float(main_data.get("pressure")),
            humidity=safe_float(main_data.get("humidity")),
            wind_speed=safe_float(wind_data.get("speed")),
            wind_degrees=safe_int(wind_data.get("deg")),
            wind_gust=safe_float(wind_data.get("gust")),
            precipitation=precipitation,
            rain=rain,
            snow=snow,
            rain_probability=None if pop is None else pop * 100.0,
            cloud_cover=safe_float(dig(item, "clouds", "all")),
            visibility=safe_float(item.get("visibility")),
            sunrise=sunrise,
            sunset=sunset,
            extras={"description": description} if description else {},
        )
