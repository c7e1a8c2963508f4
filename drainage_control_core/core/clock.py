import dataclasses
import typing as t

from ..utils.time import SECONDS_PER_HOUR, day_of_week
from .moment import Moment, TimelineInfo


@dataclasses.dataclass(frozen=True)
class ClockReading:
    """Calendar fields of the current simulation time, in the units used by control rules"""

    elapsed_hours: float
    date: int
    clock_time: float
    day_of_year: int
    day: int
    month: int
    world_time: float


class SimulationClock:
    """Keeps track of the current simulation moment. Elapsed time is measured from the
    timeline's ``start_time``
    """

    def __init__(self, timeline_info: TimelineInfo, moment: t.Optional[Moment] = None):
        self.timeline_info = timeline_info
        self.moment = moment or Moment(timeline_info.start_time, timeline_info)

    @property
    def elapsed_seconds(self) -> float:
        return self.moment.seconds - self.timeline_info.timestamp_to_seconds(
            self.timeline_info.start_time
        )

    def set_moment(self, moment: Moment):
        self.moment = moment

    def advance(self, seconds: float) -> Moment:
        self.moment = self.moment.add_seconds(seconds)
        return self.moment

    def current(self) -> ClockReading:
        dt = self.moment.as_datetime
        return ClockReading(
            elapsed_hours=self.elapsed_seconds / SECONDS_PER_HOUR,
            date=dt.date().toordinal(),
            clock_time=(dt.hour * 3600 + dt.minute * 60 + dt.second + dt.microsecond / 1e6)
            / SECONDS_PER_HOUR,
            day_of_year=dt.timetuple().tm_yday,
            day=day_of_week(dt.date()),
            month=dt.month,
            world_time=self.moment.world_time,
        )
