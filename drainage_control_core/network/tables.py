import datetime
import typing as t

import numpy as np

from drainage_control_core.core.moment import TimelineInfo
from drainage_control_core.utils.time import string_to_datetime


class Table:
    """x/y lookup table. Values between entries are interpolated linearly, values outside
    the table take the value of the nearest end. An empty table always returns 0
    """

    def __init__(self, name: str, x: t.Sequence[float], y: t.Sequence[float]):
        x = np.asarray(x, dtype=np.float64)
        y = np.asarray(y, dtype=np.float64)
        if x.shape != y.shape or x.ndim != 1:
            raise ValueError(f"table '{name}' needs as many x values as y values")
        if np.any(np.diff(x) <= 0):
            raise ValueError(f"table '{name}' must have strictly increasing x values")
        self.name = name
        self.x = x
        self.y = y

    def __len__(self):
        return len(self.x)

    def lookup(self, x: float) -> float:
        if not len(self.x):
            return 0.0
        return float(np.interp(x, self.x, self.y))


class Curve(Table):
    pass


class TimeSeries(Table):
    """Table indexed by unix time in seconds"""

    @classmethod
    def from_entries(
        cls,
        name: str,
        entries: t.Iterable[t.Tuple[t.Union[str, float, datetime.datetime], float]],
        timeline_info: t.Optional[TimelineInfo] = None,
    ):
        """Create a time series from ``(time, value)`` pairs. A time can be a datetime, a date
        string or a number of seconds. Numbers are relative to the timeline's reference when a
        ``timeline_info`` is given and unix times otherwise
        """
        times, values = [], []
        for when, value in entries:
            times.append(cls._to_unix_time(when, timeline_info))
            values.append(value)
        return cls(name, times, values)

    @staticmethod
    def _to_unix_time(when, timeline_info: t.Optional[TimelineInfo]) -> float:
        if isinstance(when, str):
            when = string_to_datetime(when)
        if isinstance(when, datetime.datetime):
            if when.tzinfo is None:
                when = when.replace(tzinfo=datetime.timezone.utc)
            return when.timestamp()
        if timeline_info is not None:
            return timeline_info.reference + float(when)
        return float(when)


class TableCollection:
    def __init__(
        self,
        curves: t.Sequence[Curve] = (),
        time_series: t.Sequence[TimeSeries] = (),
    ):
        self.curves = list(curves)
        self.time_series = list(time_series)

    def lookup_curve(self, index: int, x: float) -> float:
        return self.curves[index].lookup(x)

    def lookup_time_series(self, index: int, unix_time: float) -> float:
        return self.time_series[index].lookup(unix_time)
