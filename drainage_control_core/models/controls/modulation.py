"""Settings of control actions, including the continuously modulated ones"""

import typing as t

from drainage_control_core.core.attributes import LinkType

from .actions import Action, CurveSetting, FixedSetting, PidSetting, TimeSeriesSetting
from .premise import resolve_operand
from .variables import VariableResolver


class Tables(t.Protocol):
    def lookup_curve(self, index: int, x: float) -> float:
        ...

    def lookup_time_series(self, index: int, unix_time: float) -> float:
        ...


class ModulationEngine:
    def __init__(self, resolver: VariableResolver, tables: Tables):
        self.resolver = resolver
        self.tables = tables

    def compute(self, action: Action, step_minutes: float) -> float:
        """Calculate the setting of an action for the current step. PID controllers advance
        their error history every time they are computed

        :param action: The action to calculate the setting for
        :param step_minutes: The control time step in minutes
        :returns: The new setting
        """
        mode = action.mode
        if isinstance(mode, FixedSetting):
            return mode.value
        if isinstance(mode, CurveSetting):
            return self._curve_setting(action, mode)
        if isinstance(mode, TimeSeriesSetting):
            return self.tables.lookup_time_series(mode.series, self.resolver.reading.world_time)
        if isinstance(mode, PidSetting):
            return self._pid_setting(action, mode, step_minutes)
        raise TypeError(f"Unsupported setting mode {type(mode).__name__}")

    def _curve_setting(self, action: Action, mode: CurveSetting) -> float:
        x = self.resolver.resolve(mode.controller)
        if x is None:
            return self.resolver.target_setting(action.link)
        return self.tables.lookup_curve(mode.curve, x)

    def _pid_setting(self, action: Action, pid: PidSetting, dt: float) -> float:
        current = self.resolver.target_setting(action.link)
        controlled = self.resolver.resolve(pid.controller)
        setpoint = resolve_operand(pid.setpoint, self.resolver)
        if controlled is None or setpoint is None:
            return current

        error = setpoint - controlled
        update = pid.kp * (error - pid.e1)
        if dt > 0:
            update += pid.ki * error * dt
            update += pid.kd * (error - 2.0 * pid.e1 + pid.e2) / dt
        pid.e2 = pid.e1
        pid.e1 = error

        setting = max(current + update, 0.0)
        if self.resolver.link_type(action.link) is not LinkType.PUMP:
            setting = min(setting, 1.0)
        return setting
