"""WeatherAPI.com hourly forecast provider implementation."""
import logging
from datetime import datetime
from typing import Any, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from weather_data import Coordinate, ForecastEntry, ForecastSeries, from_epoch
from weather_errors import AddressNotFound, NoForecastData, TransportError
from weather_provider import WeatherProviderBase, dig, km_to_m, kph_to_ms, safe_float, safe_int


class WeatherAPIProvider(WeatherProviderBase):
    """
    Weather provider using WeatherAPI.com.

    Search:   https://www.weatherapi.com/docs/#apis-search
    Forecast: https://www.weatherapi.com/docs/#apis-forecast (hourly steps)
    """

    NAME = "WeatherAPI"
    SEARCH_URL = "https://api.weatherapi.com/v1/search.json"
    FORECAST_URL = "https://api.weatherapi.com/v1/forecast.json"
    FORECAST_DAYS = 3

    def geocode(self, address: str) -> Coordinate:
        places = self._get_json(self.SEARCH_URL, params={"key": self.require_key(), "q": address})
        if not isinstance(places, list):
            raise TransportError("Unexpected search response: expected a list of places")
        if not places:
            raise AddressNotFound(address)

        place = places[0]
        lat = safe_float(place.get("lat"))
        lon = safe_float(place.get("lon"))
        if lat is None or lon is None:
            raise TransportError("Search response is missing coordinates")
        parts = [place.get("name"), place.get("region"), place.get("country")]
        display_name = ", ".join(p for p in parts if p) or None
        return Coordinate(latitude=lat, longitude=lon, display_name=display_name)

    def fetch_forecast(self, coordinate: Coordinate) -> ForecastSeries:
        params = {
            "key": self.require_key(),
            "q": coordinate.query(),
            "days": self.FORECAST_DAYS,
            "aqi": "no",
            "alerts": "no",
        }
        data = self._get_json(self.FORECAST_URL, params=params)

        days = dig(data, "forecast", "forecastday")
        if not isinstance(days, list) or not days:
            raise NoForecastData("The WeatherAPI server did not provide weather forecast data")
        zone = _zone(dig(data, "location", "tz_id"))

        entries = []
        for day in days:
            sunrise = _astro_time(dig(day, "date"), dig(day, "astro", "sunrise"), zone)
            sunset = _astro_time(dig(day, "date"), dig(day, "astro", "sunset"), zone)
            for hour in dig(day, "hour") or []:
                entry = self._parse_hour(hour, sunrise, sunset)
                if entry is not None:
                    entries.append(entry)

        logging.info(f"Parsed {len(entries)} WeatherAPI forecast entries")
        return ForecastSeries(entries, provider=self.NAME)

    def _parse_hour(self, hour: Any, sunrise, sunset) -> Optional[ForecastEntry]:
        if not isinstance(hour, dict):
            return None
        timestamp = from_epoch(hour.get("time_epoch"))
        if timestamp is None:
            return None

        extras = {}
        for source, target in (
            ("dewpoint_c", "dew_point"),
            ("windchill_c", "wind_chill"),
            ("heatindex_c", "heat_index"),
        ):
            value = safe_float(hour.get(source))
            if value is not None:
                extras[target] = value

        return ForecastEntry(
            timestamp=timestamp,
            condition=dig(hour, "condition", "text"),
            temperature=safe_float(hour.get("temp_c")),
            feels_like=safe_float(hour.get("feelslike_c")),
            pressure=safe_float(hour.get("pressure_mb")),
            humidity=safe_float(hour.get("humidity")),
            wind_speed=kph_to_ms(safe_float(hour.get("wind_kph"))),
            wind_degrees=safe_int(hour.get("wind_degree")),
            wind_gust=kph_to_ms(safe_float(hour.get("gust_kph"))),
            precipitation=safe_float(hour.get("precip_mm")),
            rain_probability=safe_float(hour.get("chance_of_rain")),
            snow_probability=safe_float(hour.get("chance_of_snow")),
            cloud_cover=safe_float(hour.get("cloud")),
            visibility=km_to_m(safe_float(hour.get("vis_km"))),
            uv_index=safe_float(hour.get("uv")),
            sunrise=sunrise,
            sunset=sunset,
            extras=extras,
        )


def _zone(tz_id: Optional[str]) -> Optional[ZoneInfo]:
    if not tz_id:
        return None
    try:
        return ZoneInfo(tz_id)
    except (ZoneInfoNotFoundError, ValueError):
        logging.warning(f"Unknown time zone from WeatherAPI: {tz_id}")
        return None


def _astro_time(day: Optional[str], clock: Optional[str], zone: Optional[ZoneInfo]) -> Optional[datetime]:
    """Combine a forecast day ("2023-05-11") and a local clock ("05:12 AM")."""
    if not day or not clock or zone is None:
        return None
    try:
        naive = datetime.strptime(f"{day} {clock}", "%Y-%m-%d %I:%M %p")
    except ValueError:
        # "No sunrise" / "No sunset" near the poles
        return None
    return naive.replace(tzinfo=zone)
