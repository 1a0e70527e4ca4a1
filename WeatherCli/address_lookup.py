"""Address lookup through the OpenStreetMap Nominatim search API."""
import logging
from typing import Any, Optional

import requests

from weather_data import Coordinate
from weather_errors import AddressNotFound, TransportError


class NominatimGeocoder:
    """
    Resolve free-text addresses to coordinates.

    Uses the public search endpoint: https://nominatim.org/release-docs/develop/api/Search/
    Nominatim requires an identifying User-Agent and allows no API key.
    """

    BASE_URL = "https://nominatim.openstreetmap.org/search"
    USER_AGENT = "weather-cli"

    def __init__(self, session: Optional[requests.Session] = None, timeout: float = 10):
        self.session = session or requests.Session()
        self.timeout = timeout

    def search(self, address: str) -> Coordinate:
        """
        Look up the best match for an address.

        Raises:
            AddressNotFound: If Nominatim reports zero matches
            TransportError: On network errors, HTTP errors or undecodable responses
        """
        params = {"q": address, "format": "json", "limit": 1}
        headers = {"User-Agent": self.USER_AGENT}
        try:
            logging.info(f"Geocoding address via Nominatim: {address!r}")
            response = self.session.get(self.BASE_URL, params=params, headers=headers, timeout=self.timeout)
            logging.info(f"Nominatim response status: {response.status_code}")
        except requests.exceptions.RequestException as e:
            logging.error(f"Network error during geocoding: {type(e).__name__}")
            raise TransportError(f"Error connecting to {self.BASE_URL}: {type(e).__name__}") from e

        if not response.ok:
            logging.error(f"Geocoding failed with status {response.status_code}")
            raise TransportError(
                f"Error connecting to {self.BASE_URL}. Status code: {response.status_code}"
            )

        try:
            data = response.json()
        except ValueError as e:
            logging.error(f"Failed to parse geocoding response: {e}")
            raise TransportError(f"Unable to recognize json response from server: {e}") from e

        return parse_search_result(data, address)


def parse_search_result(data: Any, address: str) -> Coordinate:
    """Turn a Nominatim search payload into the first matching Coordinate."""
    if not isinstance(data, list):
        raise TransportError("Unexpected geocoding response: expected a list of places")
    if not data:
        logging.warning(f"No geocoding match for {address!r}")
        raise AddressNotFound(address)

    place = data[0]
    try:
        coordinate = Coordinate(
            latitude=float(place["lat"]),
            longitude=float(place["lon"]),
            display_name=place.get("display_name"),
        )
    except (KeyError, TypeError, ValueError) as e:
        raise TransportError(f"Failed to parse geocoding response: {e}") from e

    logging.debug(f"Geocoded {address!r} to {coordinate}")
    return coordinate
