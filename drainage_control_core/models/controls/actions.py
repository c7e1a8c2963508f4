import dataclasses
import typing as t

from drainage_control_core.core.attributes import Attribute

from .premise import Operand
from .variables import Variable


@dataclasses.dataclass(frozen=True)
class FixedSetting:
    value: float


@dataclasses.dataclass(frozen=True)
class CurveSetting:
    """Setting looked up in a curve, using the value of ``controller`` as x value"""

    curve: int
    controller: Variable


@dataclasses.dataclass(frozen=True)
class TimeSeriesSetting:
    series: int


@dataclasses.dataclass
class PidSetting:
    """Setting from a discrete PID controller that drives ``controller`` towards ``setpoint``.
    ``e1`` and ``e2`` are the errors of the previous two evaluations
    """

    controller: Variable
    setpoint: Operand
    kp: float
    ki: float
    kd: float
    e1: float = 0.0
    e2: float = 0.0

    def reset(self):
        self.e1 = 0.0
        self.e2 = 0.0


SettingMode = t.Union[FixedSetting, CurveSetting, TimeSeriesSetting, PidSetting]


@dataclasses.dataclass(eq=False)
class Action:
    link: int
    link_id: str
    attribute: Attribute
    mode: SettingMode

    @property
    def is_modulated(self) -> bool:
        return not isinstance(self.mode, FixedSetting)
