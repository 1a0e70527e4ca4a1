"""Meteorological wind direction from degrees."""
from typing import Optional

# Sixteen compass points, each covering 22.5 degrees centred on its bearing
COMPASS_POINTS = (
    "North", "North-northeast", "Northeast", "East-northeast",
    "East", "East-southeast", "Southeast", "South-southeast",
    "South", "South-southwest", "Southwest", "West-southwest",
    "West", "West-northwest", "Northwest", "North-northwest",
)


def wind_direction(degrees: Optional[float]) -> Optional[str]:
    """
    Name the compass point the wind blows from.

    Args:
        degrees: Wind direction in degrees (0-360), or None

    Returns:
        Compass point name, "Unknown" for out-of-range values, None if absent
    """
    if degrees is None:
        return None
    if degrees < 0 or degrees > 360:
        return "Unknown"
    index = int((degrees + 11.25) // 22.5) % len(COMPASS_POINTS)
    return COMPASS_POINTS[index]
