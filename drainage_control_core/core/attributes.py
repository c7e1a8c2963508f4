import enum


class ObjectType(enum.Enum):
    NODE = "NODE"
    LINK = "LINK"
    CONDUIT = "CONDUIT"
    PUMP = "PUMP"
    ORIFICE = "ORIFICE"
    WEIR = "WEIR"
    OUTLET = "OUTLET"
    SIMULATION = "SIMULATION"

    @property
    def is_link(self) -> bool:
        return self not in (ObjectType.NODE, ObjectType.SIMULATION)


class Attribute(enum.Enum):
    DEPTH = "DEPTH"
    HEAD = "HEAD"
    VOLUME = "VOLUME"
    INFLOW = "INFLOW"
    FLOW = "FLOW"
    STATUS = "STATUS"
    SETTING = "SETTING"
    TIMEOPEN = "TIMEOPEN"
    TIMECLOSED = "TIMECLOSED"
    TIME = "TIME"
    DATE = "DATE"
    CLOCKTIME = "CLOCKTIME"
    DAYOFYEAR = "DAYOFYEAR"
    DAY = "DAY"
    MONTH = "MONTH"


class LinkType(enum.IntEnum):
    CONDUIT = 0
    PUMP = 1
    ORIFICE = 2
    WEIR = 3
    OUTLET = 4

    @classmethod
    def from_name(cls, name: str) -> "LinkType":
        try:
            return cls[name.upper()]
        except KeyError:
            raise ValueError(f"Unknown link type {name!r}") from None


SIMULATION_ATTRIBUTES = frozenset(
    {
        Attribute.TIME,
        Attribute.DATE,
        Attribute.CLOCKTIME,
        Attribute.DAYOFYEAR,
        Attribute.DAY,
        Attribute.MONTH,
    }
)

# object types of control rules that must refer to a link of one specific type
OBJECT_LINK_TYPES = {
    ObjectType.CONDUIT: LinkType.CONDUIT,
    ObjectType.PUMP: LinkType.PUMP,
    ObjectType.ORIFICE: LinkType.ORIFICE,
    ObjectType.WEIR: LinkType.WEIR,
    ObjectType.OUTLET: LinkType.OUTLET,
}
