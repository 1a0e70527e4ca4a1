"""Pick the forecast entry closest to a requested instant."""
import logging
import re
from datetime import datetime
from typing import Iterable, Optional

from weather_data import ForecastEntry
from weather_errors import EmptySeries, InvalidDateFormat

DATE_ONLY = re.compile(r"^\d{4}-\d{2}-\d{2}$")
DATE_TIME = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}$")


def local_now() -> datetime:
    """Current instant as an aware datetime in the local time zone."""
    return datetime.now().astimezone()


def parse_target_date(text: Optional[str], now: Optional[datetime] = None) -> datetime:
    """
    Parse the value of a ``date=`` token into an aware local datetime.

    Accepted forms:
        "" or "now"           - the current instant
        yyyy-mm-dd            - that day at the current local time of day
        yyyy-mm-ddThh:mm:ss   - that local date and time

    Args:
        text: Value after "date=" (None means no date token was given)
        now: Current instant, injectable for tests

    Raises:
        InvalidDateFormat: For any other shape or an impossible calendar date
    """
    now = now or local_now()
    if now.tzinfo is None:
        now = now.astimezone()
    value = (text or "").strip()

    if not value or value.lower() == "now":
        return now

    if DATE_ONLY.match(value):
        value = f"{value}T{now.strftime('%H:%M:%S')}"
    elif not DATE_TIME.match(value):
        raise InvalidDateFormat(text)

    try:
        naive = datetime.strptime(value, "%Y-%m-%dT%H:%M:%S")
    except ValueError as e:
        logging.debug(f"Rejected date {text!r}: {e}")
        raise InvalidDateFormat(text) from e
    return _localize(naive, text)


def _localize(naive: datetime, text: Optional[str]) -> datetime:
    """Attach the local offset, rejecting wall times skipped or repeated by a DST change."""
    aware = naive.astimezone()
    if aware.replace(tzinfo=None) != naive:
        logging.debug(f"Rejected date {text!r}: {naive} does not exist in the local time zone")
        raise InvalidDateFormat(text)
    if naive.replace(fold=1).astimezone().utcoffset() != aware.utcoffset():
        logging.debug(f"Rejected date {text!r}: {naive} is ambiguous in the local time zone")
        raise InvalidDateFormat(text)
    return aware


def resolve_nearest(series: Iterable[ForecastEntry], target: datetime) -> ForecastEntry:
    """
    Return the entry whose timestamp is closest to target.

    Equidistant entries resolve to the earlier timestamp. The entry returned
    is always a member of the series; nothing is interpolated.

    Raises:
        EmptySeries: If the series has no entries
    """
    best = None
    best_key = None
    for entry in series:
        # Sorting key: distance first, then timestamp so ties favour the earlier entry
        key = (abs(entry.timestamp - target), entry.timestamp)
        if best_key is None or key < best_key:
            best, best_key = entry, key

    if best is None:
        raise EmptySeries("Cannot resolve a date against an empty forecast series")

    logging.debug(f"Nearest forecast entry to {target.isoformat()} is {best.timestamp.isoformat()} (off by {best_key[0]})")
    return best
