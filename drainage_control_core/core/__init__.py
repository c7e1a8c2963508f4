from .attributes import Attribute, LinkType, ObjectType
from .clock import ClockReading, SimulationClock
from .index import NOT_FOUND, IdIndex, ObjectKind, ProjectIndex
from .moment import Moment, TimelineInfo

__all__ = [
    "Attribute",
    "LinkType",
    "ObjectType",
    "ClockReading",
    "SimulationClock",
    "NOT_FOUND",
    "IdIndex",
    "ObjectKind",
    "ProjectIndex",
    "Moment",
    "TimelineInfo",
]
