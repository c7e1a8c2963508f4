from __future__ import annotations

import typing as t

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from drainage_control_core.core.moment import TimelineInfo


class Settings(BaseSettings):
    name: str = "controls"
    log_level: str = "INFO"
    log_format: str = "[{asctime}] [{levelname:8s}] {name:17s}: {message}"

    reference: float = 0
    time_scale: float = 1
    start_time: int = 0
    duration: int = 0

    # seconds between two evaluations of the control rules
    control_step: float = Field(default=60.0, gt=0)
    models: t.List[dict] = Field(default_factory=list)

    model_config = SettingsConfigDict(env_prefix="drainage_", extra="forbid")

    def apply_scenario_config(self, config: dict):
        if simulation_info := config.get("simulation_info"):
            self.start_time = simulation_info.get("start_time", self.start_time)
            self.time_scale = simulation_info.get("time_scale", self.time_scale)
            self.reference = simulation_info.get("reference_time", self.reference)
            self.duration = simulation_info.get("duration", self.duration)
        if "control_step" in config:
            self.control_step = config["control_step"]
        self.models = config.get("models", [])

    @property
    def timeline_info(self) -> TimelineInfo:
        return TimelineInfo(
            reference=self.reference,
            time_scale=self.time_scale,
            start_time=self.start_time,
            duration=self.duration,
        )
