"""Variables of control rules and their resolution against the live network state"""

import dataclasses
import typing as t

from drainage_control_core.core.attributes import (
    SIMULATION_ATTRIBUTES,
    Attribute,
    LinkType,
    ObjectType,
)
from drainage_control_core.core.clock import ClockReading
from drainage_control_core.core.index import NOT_FOUND
from drainage_control_core.utils.time import SECONDS_PER_HOUR


class StateOwner(t.Protocol):
    def get_attribute(self, object_type: ObjectType, index: int, attribute: Attribute) -> float:
        ...

    def set_link_attribute(self, index: int, attribute: Attribute, value: float):
        ...

    def get_target_setting(self, index: int) -> float:
        ...

    def get_link_type(self, index: int) -> LinkType:
        ...

    def get_time_last_set(self, index: int) -> float:
        ...


class Clock(t.Protocol):
    def current(self) -> ClockReading:
        ...


@dataclasses.dataclass(frozen=True)
class Variable:
    object_type: ObjectType
    index: int
    attribute: Attribute

    @property
    def is_resolved(self) -> bool:
        return self.object_type is ObjectType.SIMULATION or self.index != NOT_FOUND


_STATUS_LINK_TYPES = (LinkType.CONDUIT, LinkType.PUMP)
_SETTING_LINK_TYPES = (LinkType.ORIFICE, LinkType.WEIR, LinkType.OUTLET)


class VariableResolver:
    """Reads variable values from the network state and the simulation clock, and writes
    link settings back to the network state.

    A reading that is not defined for the current state (eg. the time a link has been open
    while it is closed) resolves to ``None``
    """

    def __init__(self, state: StateOwner, clock: Clock):
        self.state = state
        self.clock = clock
        self._reading: t.Optional[ClockReading] = None

    def start_step(self):
        """Take a fresh clock reading, used for all resolutions until the next call"""
        self._reading = self.clock.current()

    @property
    def reading(self) -> ClockReading:
        if self._reading is None:
            self.start_step()
        return self._reading

    def resolve(self, variable: Variable) -> t.Optional[float]:
        if not variable.is_resolved:
            raise ValueError(f"variable {variable} refers to an unknown object")
        if variable.object_type is ObjectType.SIMULATION:
            return self._resolve_simulation(variable.attribute)

        attribute = variable.attribute
        if variable.object_type is ObjectType.NODE:
            return self.state.get_attribute(ObjectType.NODE, variable.index, attribute)

        link = variable.index
        if attribute is Attribute.STATUS:
            if self.link_type(link) not in _STATUS_LINK_TYPES:
                return None
        elif attribute is Attribute.SETTING:
            if self.link_type(link) not in _SETTING_LINK_TYPES:
                return None
        elif attribute in (Attribute.TIMEOPEN, Attribute.TIMECLOSED):
            return self._time_in_state(link, is_open=attribute is Attribute.TIMEOPEN)
        return self.state.get_attribute(variable.object_type, link, attribute)

    def _time_in_state(self, link: int, is_open: bool) -> t.Optional[float]:
        currently_open = self.state.get_attribute(ObjectType.LINK, link, Attribute.STATUS) > 0
        if currently_open != is_open:
            return None
        last_set = self.state.get_time_last_set(link) / SECONDS_PER_HOUR
        return self.reading.elapsed_hours - last_set

    def _resolve_simulation(self, attribute: Attribute) -> float:
        reading = self.reading
        if attribute not in SIMULATION_ATTRIBUTES:
            return 0.0
        return float(
            {
                Attribute.TIME: reading.elapsed_hours,
                Attribute.DATE: reading.date,
                Attribute.CLOCKTIME: reading.clock_time,
                Attribute.DAYOFYEAR: reading.day_of_year,
                Attribute.DAY: reading.day,
                Attribute.MONTH: reading.month,
            }[attribute]
        )

    def apply(self, link: int, attribute: Attribute, value: float):
        self.state.set_link_attribute(link, attribute, value)

    def target_setting(self, link: int) -> float:
        return self.state.get_target_setting(link)

    def link_type(self, link: int) -> LinkType:
        return self.state.get_link_type(link)
