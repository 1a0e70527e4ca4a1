"""AccuWeather 5 day daily forecast provider implementation."""
import logging
from typing import Any, Optional

from weather_data import Coordinate, ForecastEntry, ForecastSeries, from_epoch
from weather_errors import AddressNotFound, NoForecastData, TransportError
from weather_provider import WeatherProviderBase, dig, kph_to_ms, safe_float, safe_int


class AccuWeatherProvider(WeatherProviderBase):
    """
    Weather provider using the AccuWeather Core Weather API.

    AccuWeather forecasts are keyed by its own location id, so fetching a
    forecast first resolves the coordinate to a location key:
    https://developer.accuweather.com/accuweather-locations-api/apis
    https://developer.accuweather.com/accuweather-forecast-api/apis
    """

    NAME = "AccuWeather"
    GEOPOSITION_URL = "https://dataservice.accuweather.com/locations/v1/cities/geoposition/search"
    DAILY_FORECAST_URL = "https://dataservice.accuweather.com/forecasts/v1/daily/5day/{location_key}"

    def geocode(self, address: str) -> Coordinate:
        self.require_key()
        return self.geocoder.search(address)

    def location_key(self, coordinate: Coordinate) -> str:
        params = {"apikey": self.require_key(), "q": coordinate.query()}
        data = self._get_json(self.GEOPOSITION_URL, params=params)
        key = dig(data, "Key")
        if not key:
            # AccuWeather answers null when the point is outside its coverage
            raise AddressNotFound(coordinate.display_name or coordinate.query())
        logging.debug(f"AccuWeather location key for {coordinate.query()}: {key}")
        return str(key)

    def fetch_forecast(self, coordinate: Coordinate) -> ForecastSeries:
        url = self.DAILY_FORECAST_URL.format(location_key=self.location_key(coordinate))
        params = {"apikey": self.require_key(), "details": "true", "metric": "true"}
        data = self._get_json(url, params=params)

        days = dig(data, "DailyForecasts")
        if days is None:
            raise NoForecastData("The AccuWeather server did not provide weather forecast data")
        if not isinstance(days, list):
            raise TransportError("Unexpected AccuWeather response: 'DailyForecasts' is not a list")

        entries = [entry for entry in (self._parse_day(day) for day in days) if entry is not None]
        logging.info(f"Parsed {len(entries)} AccuWeather forecast entries")
        return ForecastSeries(entries, provider=self.NAME)

    def _parse_day(self, item: Any) -> Optional[ForecastEntry]:
        if not isinstance(item, dict):
            return None
        timestamp = from_epoch(item.get("EpochDate"))
        if timestamp is None:
            return None

        day = item.get("Day") or {}
        night = item.get("Night") or {}
        rain = safe_float(dig(day, "Rain", "Value"))
        snow_cm = safe_float(dig(day, "Snow", "Value"))

        extras = {}
        for key, value in (
            ("precipitation_type", day.get("PrecipitationType")),
            ("night_condition", night.get("LongPhrase") or night.get("IconPhrase")),
            ("night_precipitation_type", night.get("PrecipitationType")),
            ("night_rain_probability", safe_float(night.get("RainProbability"))),
            ("night_snow_probability", safe_float(night.get("SnowProbability"))),
            ("night_wind_speed", kph_to_ms(safe_float(dig(night, "Wind", "Speed", "Value")))),
            ("night_cloud_cover", safe_float(night.get("CloudCover"))),
        ):
            if value is not None:
                extras[key] = value

        return ForecastEntry(
            timestamp=timestamp,
            condition=day.get("LongPhrase") or day.get("IconPhrase"),
            temperature_min=safe_float(dig(item, "Temperature", "Minimum", "Value")),
            temperature_max=safe_float(dig(item, "Temperature", "Maximum", "Value")),
            feels_like=safe_float(dig(item, "RealFeelTemperature", "Maximum", "Value")),
            wind_speed=kph_to_ms(safe_float(dig(day, "Wind", "Speed", "Value"))),
            wind_degrees=safe_int(dig(day, "Wind", "Direction", "Degrees")),
            wind_gust=kph_to_ms(safe_float(dig(day, "WindGust", "Speed", "Value"))),
            precipitation=safe_float(dig(day, "TotalLiquid", "Value")),
            rain=rain,
            snow=None if snow_cm is None else snow_cm * 10.0,
            rain_probability=safe_float(day.get("RainProbability")),
            snow_probability=safe_float(day.get("SnowProbability")),
            cloud_cover=safe_float(day.get("CloudCover")),
            sunrise=from_epoch(dig(item, "Sun", "EpochRise")),
            sunset=from_epoch(dig(item, "Sun", "EpochSet")),
            extras=extras,
        )
