"""AerisWeather forecast provider implementation."""
import logging
from typing import Any, Optional, Tuple

from weather_data import Coordinate, ForecastEntry, ForecastSeries, from_epoch
from weather_errors import AuthenticationFailed, NoForecastData, TransportError
from weather_provider import WeatherProviderBase, dig, km_to_m, kph_to_ms, safe_float, safe_int

AUTH_ERROR_CODES = {"invalid_client", "unauthorized_client", "unauthorized_namespace", "invalid_location"}


class AerisWeatherProvider(WeatherProviderBase):
    """
    Weather provider using the AerisWeather (Xweather) forecasts endpoint.

    https://www.xweather.com/docs/weather-api/endpoints/forecasts

    The stored credential is "client_id:client_secret".
    """

    NAME = "AerisWeather"
    FORECAST_URL = "https://api.aerisapi.com/forecasts/{lat},{lon}"

    def client_credentials(self) -> Tuple[str, str]:
        client_id, _, client_secret = self.require_key().partition(":")
        if not client_id or not client_secret:
            raise AuthenticationFailed(
                "AerisWeather credential must be entered as client_id:client_secret"
            )
        return client_id, client_secret

    def geocode(self, address: str) -> Coordinate:
        self.client_credentials()
        return self.geocoder.search(address)

    def fetch_forecast(self, coordinate: Coordinate) -> ForecastSeries:
        client_id, client_secret = self.client_credentials()
        url = self.FORECAST_URL.format(lat=coordinate.latitude, lon=coordinate.longitude)
        params = {"format": "json", "client_id": client_id, "client_secret": client_secret}
        data = self._get_json(url, params=params)

        # Aeris reports most failures with HTTP 200 and success=false
        if isinstance(data, dict) and data.get("success") is False:
            self._raise_api_error(data.get("error") or {})

        periods = dig(data, "response", 0, "periods")
        if not isinstance(periods, list) or not periods:
            raise NoForecastData("The AerisWeather server did not provide weather forecast data")

        entries = [entry for entry in (self._parse_period(p) for p in periods) if entry is not None]
        logging.info(f"Parsed {len(entries)} AerisWeather forecast entries")
        return ForecastSeries(entries, provider=self.NAME)

    def _raise_api_error(self, error: Any) -> None:
        code = dig(error, "code") or "unknown"
        message = f"AerisWeather API error {code}: {dig(error, 'description') or 'Unknown error'}"
        logging.error(message)
        if code in AUTH_ERROR_CODES:
            raise AuthenticationFailed(message)
        if code == "warn_no_data":
            raise NoForecastData(message)
        raise TransportError(message)

    def _parse_period(self, period: Any) -> Optional[ForecastEntry]:
        if not isinstance(period, dict):
            return None
        timestamp = from_epoch(period.get("timestamp"))
        if timestamp is None:
            return None

        snow_cm = safe_float(period.get("snowCM"))
        extras = {}
        dew_point = safe_float(period.get("dewpointC"))
        if dew_point is not None:
            extras["dew_point"] = dew_point

        return ForecastEntry(
            timestamp=timestamp,
            condition=period.get("weather"),
            temperature=safe_float(period.get("tempC")),
            feels_like=safe_float(period.get("feelslikeC")),
            temperature_min=safe_float(period.get("minTempC")),
            temperature_max=safe_float(period.get("maxTempC")),
            pressure=safe_float(period.get("pressureMB")),
            humidity=safe_float(period.get("humidity")),
            wind_speed=kph_to_ms(safe_float(period.get("windSpeedKPH"))),
            wind_degrees=safe_int(period.get("windDirDEG")),
            wind_gust=kph_to_ms(safe_float(period.get("windGustKPH"))),
            precipitation=safe_float(period.get("precipMM")),
            snow=None if snow_cm is None else snow_cm * 10.0,
            rain_probability=safe_float(period.get("pop")),
            cloud_cover=safe_float(period.get("sky")),
            visibility=km_to_m(safe_float(period.get("visibilityKM"))),
            uv_index=safe_float(period.get("uvi")),
            sunrise=from_epoch(period.get("sunrise")),
            sunset=from_epoch(period.get("sunset")),
            extras=extras,
        )
