import datetime

import pytest

from drainage_control_core.core.clock import SimulationClock
from drainage_control_core.core.moment import Moment, TimelineInfo


class TestSimulationClock:
    def test_initial_reading(self, clock, timeline_info):
        reading = clock.current()
        assert reading.elapsed_hours == 0
        assert reading.date == datetime.date(2024, 6, 3).toordinal()
        assert reading.clock_time == 0
        assert reading.day == 2
        assert reading.month == 6
        assert reading.day_of_year == 155
        assert reading.world_time == timeline_info.reference

    def test_advance(self, clock):
        clock.advance(26 * 3600 + 15 * 60)
        reading = clock.current()
        assert reading.elapsed_hours == pytest.approx(26.25)
        assert reading.clock_time == pytest.approx(2.25)
        assert reading.day == 3

    def test_sunday_is_one(self, clock):
        clock.advance(6 * 24 * 3600)
        assert clock.current().day == 1

    def test_elapsed_time_from_start_time(self):
        timeline_info = TimelineInfo(reference=1_704_067_200, time_scale=60, start_time=60)
        clock = SimulationClock(timeline_info)
        assert clock.current().elapsed_hours == 0
        assert clock.current().clock_time == 1.0
        clock.set_moment(Moment(90, timeline_info))
        assert clock.current().elapsed_hours == 0.5

    def test_leap_year_day_of_year(self):
        clock = SimulationClock(TimelineInfo.from_datetime("2024-12-31"))
        assert clock.current().day_of_year == 366
