"""Console formatting for resolved forecasts - pure functions for testability."""
from datetime import datetime
from typing import Callable, List, Optional

from weather_data import ForecastEntry
from weather_service import WeatherReport
from wind_direction import wind_direction

ABSENT = "n/a"
LABEL_WIDTH = 29
DATE_FORMAT = "%Y-%m-%d %H:%M:%S (%z)"


def format_datetime(value: Optional[datetime]) -> str:
    if value is None:
        return ABSENT
    return value.astimezone().strftime(DATE_FORMAT)


def _number(unit: str, precision: int = 1) -> Callable[[Optional[float]], str]:
    def render(value: Optional[float]) -> str:
        if value is None:
            return ABSENT
        return f"{value:.{precision}f} {unit}"
    return render


def format_wind(entry: ForecastEntry) -> str:
    if entry.wind_speed is None and entry.wind_degrees is None:
        return ABSENT
    speed = _number("m/s")(entry.wind_speed)
    if entry.wind_degrees is None:
        return speed
    return f"{speed}, {wind_direction(entry.wind_degrees)} ({entry.wind_degrees}°)"


def format_temperature_range(entry: ForecastEntry) -> str:
    if entry.temperature_min is None and entry.temperature_max is None:
        return ABSENT
    low = _number("°C")(entry.temperature_min)
    high = _number("°C")(entry.temperature_max)
    return f"{low} .. {high}"


def entry_rows(entry: ForecastEntry) -> List[tuple]:
    """Label/value pairs for one entry, absent values rendered as n/a."""
    celsius = _number("°C")
    percent = _number("%", 0)
    rows = [
        ("Weather", entry.condition or ABSENT),
        ("Temperature", celsius(entry.temperature)),
        ("Feels like", celsius(entry.feels_like)),
        ("Temperature range", format_temperature_range(entry)),
        ("Atmospheric pressure", _number("hPa", 0)(entry.pressure)),
        ("Humidity", percent(entry.humidity)),
        ("Wind", format_wind(entry)),
        ("Wind gust", _number("m/s")(entry.wind_gust)),
        ("Precipitation", _number("mm")(entry.precipitation)),
        ("Rain volume", _number("mm")(entry.rain)),
        ("Snow volume", _number("mm")(entry.snow)),
        ("Rain probability", percent(entry.rain_probability)),
        ("Snow probability", percent(entry.snow_probability)),
        ("Cloud cover", percent(entry.cloud_cover)),
        ("Visibility", _number("m", 0)(entry.visibility)),
        ("UV index", ABSENT if entry.uv_index is None else f"{entry.uv_index:.1f}"),
        ("Sunrise", format_datetime(entry.sunrise)),
        ("Sunset", format_datetime(entry.sunset)),
    ]
    for key, value in sorted(entry.extras.items()):
        label = key.replace("_", " ").capitalize()
        rows.append((label, f"{value:.1f}" if isinstance(value, float) else str(value)))
    return rows


def format_report(report: WeatherReport) -> List[str]:
    """Render a WeatherReport as printable lines."""
    requested = "now" if report.target_is_now else format_datetime(report.target)
    coordinate = report.coordinate
    found = coordinate.display_name or "unnamed place"

    lines = [
        f"Weather for '{requested}'. {report.provider} server. Request time {report.elapsed_ms} ms.",
        f"Request address: {report.address}.",
        f"Found address: {found} ({coordinate.latitude},{coordinate.longitude}).",
        f"Forecast date on the server: {format_datetime(report.entry.timestamp)}",
        "-" * 40,
    ]
    lines.extend(f"{label:<{LABEL_WIDTH}}: {value}" for label, value in entry_rows(report.entry))
    return lines
