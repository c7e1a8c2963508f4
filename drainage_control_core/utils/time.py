import datetime
import math

import dateutil.parser
from timelength import TimeLength

SECONDS_PER_HOUR = 3600.0

# DAYOFYEAR values given as month/day are interpreted in a non leap year
_DAY_OF_YEAR_REFERENCE_YEAR = 1947


def string_to_datetime(datetime_str: str, max_year=5000, **kwargs) -> datetime.datetime:
    """Convert a string into a datetime. `datetime_str` can be one of the following

        * A year (eg. '2025')
        * A unix timestamp (in seconds) (eg. '1626684322'), interpreted as UTC
        * A `dateutil` parsable string

    :param max_year: int. The cutoff for when a `datestime_str` representing a single integer is
        interpreted as a year or as a unix timestamp
    :param kwargs: Additional parameters passed directly into the `dateutil.parser` to customize
        parsing. For example `dayfirst=True`.

    """
    try:
        datetime_as_int = int(datetime_str)
    except ValueError:
        return dateutil.parser.parse(datetime_str, **kwargs)
    else:
        if datetime_as_int <= max_year:
            return datetime.datetime(datetime_as_int, month=1, day=1)
        return datetime.datetime.fromtimestamp(datetime_as_int, tz=datetime.timezone.utc).replace(
            tzinfo=None
        )


def parse_hours(token: str) -> float:
    """Parse a time of day or an elapsed time into decimal hours. Accepted are

    * decimal hours (``"2.5"``)
    * ``H:MM`` or ``H:MM:SS`` (``"2:30"``, ``"14:00:30"``)
    * durations understood by ``timelength`` (``"1h30m"``, ``"90m"``)

    :raises ValueError: when the token is none of the above
    """
    if ":" in token:
        parts = token.split(":")
        if len(parts) > 3 or not all(p.isdigit() for p in parts):
            raise ValueError(f"Invalid time: {token!r}")
        hours, minutes, seconds = (int(p) for p in parts + ["0"] * (3 - len(parts)))
        if minutes >= 60 or seconds >= 60:
            raise ValueError(f"Invalid time: {token!r}")
        return hours + minutes / 60 + seconds / SECONDS_PER_HOUR
    try:
        hours = float(token)
    except ValueError:
        pass
    else:
        if not math.isfinite(hours):
            raise ValueError(f"Invalid time: {token!r}")
        return hours
    tl = TimeLength(token)
    if not tl.result.success:
        raise ValueError(f"Invalid time: {token!r}")
    return tl.result.seconds / SECONDS_PER_HOUR


def parse_date_ordinal(token: str) -> int:
    """Parse a calendar date (month first, eg. ``"01/15/2020"``) to its proleptic ordinal"""
    try:
        return dateutil.parser.parse(token, dayfirst=False).date().toordinal()
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Invalid date: {token!r}") from e


def parse_day_of_year(token: str) -> int:
    """Parse ``mm/dd`` or a plain day number (1-365) into a day of the year"""
    if "/" in token:
        try:
            month, day = (int(p) for p in token.split("/"))
            date = datetime.date(_DAY_OF_YEAR_REFERENCE_YEAR, month, day)
        except ValueError as e:
            raise ValueError(f"Invalid day of year: {token!r}") from e
        return date.timetuple().tm_yday
    try:
        value = float(token)
    except ValueError as e:
        raise ValueError(f"Invalid day of year: {token!r}") from e
    if not value.is_integer() or not 1 <= value <= 365:
        raise ValueError(f"Invalid day of year: {token!r}")
    return int(value)


def day_of_week(date: datetime.date) -> int:
    """Day of the week with Sunday = 1 through Saturday = 7"""
    return date.isoweekday() % 7 + 1
