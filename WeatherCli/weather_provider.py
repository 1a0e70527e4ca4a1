"""Weather provider abstraction - allows swapping different weather APIs."""
import logging
from abc import ABC, abstractmethod
from typing import Any, Optional

import requests

from address_lookup import NominatimGeocoder
from weather_data import Coordinate, ForecastSeries
from weather_errors import AuthenticationFailed, TransportError, WeatherProviderError

DEFAULT_TIMEOUT = 10


class WeatherProviderBase(ABC):
    """
    Abstract base class for weather data providers.

    Subclasses set NAME and implement geocode() and fetch_forecast();
    callers never see provider-specific wire shapes.
    """

    NAME = ""

    def __init__(
        self,
        api_key: Optional[str] = None,
        session: Optional[requests.Session] = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        """
        Initialize provider.

        Args:
            api_key: Stored credential for this provider (None if never configured)
            session: HTTP session used for every request
            timeout: HTTP request timeout in seconds
        """
        self.api_key = api_key
        self.session = session or requests.Session()
        self.timeout = timeout
        self.geocoder = NominatimGeocoder(self.session, timeout)

    @property
    def name(self) -> str:
        return self.NAME

    @abstractmethod
    def geocode(self, address: str) -> Coordinate:
        """
        Resolve a free-text address to a coordinate.

        Raises:
            AuthenticationFailed: If the credential is missing or rejected
            AddressNotFound: If the address has no match
            TransportError: On network or decoding failures
        """
        pass

    @abstractmethod
    def fetch_forecast(self, coordinate: Coordinate) -> ForecastSeries:
        """
        Fetch the forecast series for a coordinate.

        Raises:
            AuthenticationFailed: If the credential is missing or rejected
            NoForecastData: If the provider returns no forecast entries
            TransportError: On network or decoding failures
        """
        pass

    def require_key(self) -> str:
        """Return the stored credential or fail before any request is made."""
        if not self.api_key:
            raise AuthenticationFailed(
                f"{self.NAME} server API access key is not set. "
                f"Please run \"weather configure {self.NAME}\" first."
            )
        return self.api_key

    def _get_json(self, url: str, params: Optional[dict] = None, headers: Optional[dict] = None) -> Any:
        """
        Issue a GET request and decode the JSON body.

        Raises:
            AuthenticationFailed: On HTTP 401/403
            TransportError: On network errors, other HTTP errors or invalid JSON
        """
        try:
            logging.info(f"Making {self.NAME} API request: {url}")
            response = self.session.get(url, params=params, headers=headers, timeout=self.timeout)
            logging.info(f"API response status: {response.status_code}")
        except requests.exceptions.RequestException as e:
            # The exception text repeats the query string, which carries the key
            logging.error(f"Network error during {self.NAME} API request to {url}: {type(e).__name__}")
            raise TransportError(f"Error connecting to {url}: {type(e).__name__}") from e

        if not response.ok:
            logging.error(f"API request failed with status {response.status_code}")
            self._handle_error_response(response)

        try:
            data = response.json()
        except ValueError as e:
            logging.error(f"Failed to parse API response: {e}", exc_info=True)
            raise TransportError(
                f"Unable to recognize json response from server: {e}"
            ) from e
        logging.debug(f"API response (truncated): {str(data)[:500]}...")
        return data

    def _handle_error_response(self, response: requests.Response) -> None:
        """Parse and raise error from a provider error response."""
        status = response.status_code
        try:
            message = self._error_message(response.json())
        except ValueError:
            logging.error(f"Non-JSON error response: HTTP {status}, body: {response.text[:500]}")
            message = response.text[:200]

        error_msg = f"{self.NAME} API error {status}: {message}"
        if status in (401, 403):
            raise AuthenticationFailed(error_msg)
        raise TransportError(error_msg)

    def _error_message(self, error_data: Any) -> str:
        """Pull a human-readable message out of a JSON error body."""
        if isinstance(error_data, dict):
            for key in ("message", "Message", "description"):
                if error_data.get(key):
                    return str(error_data[key])
            nested = error_data.get("error")
            if isinstance(nested, dict):
                return str(nested.get("message") or nested.get("description") or nested)
            if nested:
                return str(nested)
        return "Unknown error"


def safe_float(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def safe_int(value: Any) -> Optional[int]:
    number = safe_float(value)
    return None if number is None else int(round(number))


def dig(data: Any, *keys: Any) -> Any:
    """Follow nested dict keys / list indexes, returning None on any miss."""
    for key in keys:
        if isinstance(data, dict):
            data = data.get(key)
        elif isinstance(data, list) and isinstance(key, int) and -len(data) <= key < len(data):
            data = data[key]
        else:
            return None
    return data


def kph_to_ms(value: Optional[float]) -> Optional[float]:
    if value is None:
        return None
    return round(value / 3.6, 2)


def km_to_m(value: Optional[float]) -> Optional[float]:
    if value is None:
        return None
    return value * 1000.0


__all__ = [
    "WeatherProviderBase",
    "WeatherProviderError",
    "DEFAULT_TIMEOUT",
    "safe_float",
    "safe_int",
    "dig",
    "kph_to_ms",
    "km_to_m",
]
