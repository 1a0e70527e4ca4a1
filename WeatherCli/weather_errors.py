"""Error taxonomy shared by every layer of the weather CLI."""


class WeatherError(Exception):
    """Base class for every error the CLI reports to the user."""
    pass


class WeatherProviderError(WeatherError):
    """Exception raised when a weather provider fails."""
    pass


class AddressNotFound(WeatherProviderError):
    """The geocoder found no match for the requested address."""

    def __init__(self, address: str):
        super().__init__(f"Sorry, we couldn't find your address: {address}")
        self.address = address


class AuthenticationFailed(WeatherProviderError):
    """The provider credential is missing or was rejected."""
    pass


class NoForecastData(WeatherProviderError):
    """The provider answered without any usable forecast entries."""
    pass


class TransportError(WeatherProviderError):
    """Network failure, unexpected HTTP status or undecodable response."""
    pass


class UnknownProvider(WeatherError):
    def __init__(self, name: str):
        super().__init__(f"Weather provider {name} not found.")
        self.name = name


class NoDefaultConfigured(WeatherError):
    def __init__(self):
        super().__init__(
            "No default weather provider is configured. "
            "Run \"weather configure\" to choose one."
        )


class InvalidDateFormat(WeatherError):
    def __init__(self, text: str):
        super().__init__(
            f"Unable to determine date: {text}. "
            "Expected now, yyyy-mm-dd or yyyy-mm-ddThh:mm:ss."
        )
        self.text = text


class EmptySeries(WeatherError):
    """Raised when nearest-date resolution is asked to scan no entries."""
    pass
