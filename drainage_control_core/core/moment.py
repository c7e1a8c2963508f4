import dataclasses
import datetime
import functools
import typing as t

from ..utils.time import string_to_datetime

_UTC = datetime.timezone.utc


def _as_utc(dt: datetime.datetime) -> datetime.datetime:
    # naive datetimes are taken to be UTC, so that simulations do not depend on the host timezone
    return dt.replace(tzinfo=_UTC) if dt.tzinfo is None else dt


@dataclasses.dataclass(frozen=True)
class TimelineInfo:
    """Relates integer simulation timestamps to world time. ``reference`` is the unix time
    (seconds) of timestamp 0 and ``time_scale`` the number of seconds per timestamp
    """

    reference: float
    time_scale: float = 1
    start_time: int = 0
    duration: int = 0

    @property
    def end_time(self) -> int:
        return self.start_time + self.duration

    def timestamp_to_unix_time(self, timestamp: int) -> float:
        return self.reference + self.timestamp_to_seconds(timestamp)

    def unix_time_to_timestamp(self, unix_time: float) -> int:
        return self.seconds_to_timestamp(unix_time - self.reference)

    def timestamp_to_seconds(self, timestamp: int) -> float:
        return self.time_scale * timestamp

    def seconds_to_timestamp(self, seconds: float) -> int:
        return int(round(seconds / self.time_scale))

    def datetime_to_timestamp(self, dt: datetime.datetime) -> int:
        return self.unix_time_to_timestamp(_as_utc(dt).timestamp())

    def timestamp_to_datetime(self, timestamp: int) -> datetime.datetime:
        """Naive (UTC) datetime of a timestamp"""
        unix_time = self.timestamp_to_unix_time(timestamp)
        return datetime.datetime.fromtimestamp(unix_time, tz=_UTC).replace(tzinfo=None)

    def string_to_timestamp(self, dt_string: str, **kwargs):
        return self.datetime_to_timestamp(string_to_datetime(dt_string, **kwargs))

    def is_at_beginning(self, timestamp: int):
        return timestamp == self.start_time

    @classmethod
    def from_datetime(cls, start: t.Union[str, datetime.datetime], **kwargs):
        if isinstance(start, str):
            start = string_to_datetime(start)
        return cls(reference=_as_utc(start).timestamp(), **kwargs)


@functools.total_ordering
@dataclasses.dataclass
class Moment:
    timestamp: int
    timeline_info: TimelineInfo

    def __post_init__(self):
        self.timestamp = int(self.timestamp)

    @property
    def seconds(self) -> float:
        return self.timeline_info.timestamp_to_seconds(self.timestamp)

    @property
    def world_time(self) -> float:
        return self.timeline_info.timestamp_to_unix_time(self.timestamp)

    @property
    def as_datetime(self) -> datetime.datetime:
        return self.timeline_info.timestamp_to_datetime(self.timestamp)

    def add_seconds(self, seconds: float) -> "Moment":
        return Moment.from_seconds(self.seconds + seconds, self.timeline_info)

    def __eq__(self, other):
        if isinstance(other, Moment):
            other = other.seconds
        return other == self.seconds

    def __lt__(self, other):
        if isinstance(other, Moment):
            other = other.seconds
        return self.seconds < other

    @classmethod
    def from_seconds(cls, seconds: float, timeline_info: TimelineInfo):
        return cls(timeline_info.seconds_to_timestamp(seconds), timeline_info)

    @classmethod
    def from_datetime(cls, dt: datetime.datetime, timeline_info: TimelineInfo):
        return cls(timeline_info.datetime_to_timestamp(dt), timeline_info)
