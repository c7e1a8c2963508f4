import logging
import typing as t
from pathlib import Path

from drainage_control_core.core.clock import SimulationClock
from drainage_control_core.core.moment import Moment
from drainage_control_core.core.types import Model as BaseModel
from drainage_control_core.exceptions import NotReady
from drainage_control_core.json_schemas import SCHEMA_PATH
from drainage_control_core.network.loader import Network
from drainage_control_core.settings import Settings
from drainage_control_core.validate import ensure_valid_config

from .arbiter import CommittedAction
from .engine import ControlEngine


class Model(BaseModel, name="controls"):
    """Evaluates control rules every ``control_step`` seconds and writes the resulting link
    settings to the network state. The rules are given in the config, either as text
    (``rules``) or in a separate file (``rules_file``).
    """

    def __init__(self, model_config: dict):
        model_config = ensure_valid_config(
            model_config,
            "1",
            {
                "1": {"schema": MODEL_CONFIG_SCHEMA_PATH},
            },
        )
        super().__init__(model_config)
        self.engine: t.Optional[ControlEngine] = None
        self.clock: t.Optional[SimulationClock] = None
        self.control_step: t.Optional[float] = None
        self.logger: t.Optional[logging.Logger] = None

    def setup(
        self,
        network: Network,
        settings: Settings,
        logger: logging.Logger,
        data_dir: t.Optional[Path] = None,
        **_,
    ):
        """Build the control rules against the network

        :param network: The network that is controlled
        :param settings: Global settings
        :param logger: Logger for build errors and committed actions
        :param data_dir: Directory that a relative ``rules_file`` is resolved against
        :raises RuleSyntaxError: for the first invalid rule line, when the config is ``strict``
        """
        self.logger = logger
        self.control_step = self.config.get("control_step", settings.control_step)
        self.clock = SimulationClock(settings.timeline_info)
        self.engine = ControlEngine(
            network.state, network.tables, network.index, self.clock, logger=logger
        )
        errors = self.engine.build_rules(
            self._read_rules(data_dir), strict=self.config.get("strict", False)
        )
        logger.info(
            f"Built {len(self.engine.rules)} control rules"
            + (f", {len(errors)} errors" if errors else "")
        )

    def _read_rules(self, data_dir: t.Optional[Path]) -> t.Union[str, t.List[str]]:
        if "rules" in self.config:
            return self.config["rules"]
        path = Path(self.config["rules_file"])
        if not path.is_absolute() and data_dir is not None:
            path = Path(data_dir) / path
        return path.read_text()

    def update(self, moment: Moment) -> t.Tuple[t.List[CommittedAction], Moment]:
        if self.engine is None:
            raise NotReady("controls model has not been set up")
        self.clock.set_moment(moment)
        committed = self.engine.evaluate_controls(self.control_step)
        return committed, moment.add_seconds(self.control_step)

    def shutdown(self):
        self.engine = None
        self.clock = None


MODEL_CONFIG_SCHEMA_PATH = SCHEMA_PATH / "models/controls.json"
