"""The control engine: builds control rules and evaluates them every control step.

Evaluation follows a read-all-then-write order. All rules are evaluated against the state at
the start of the step, then the winning actions are written to the network state. Within a
step the outcome therefore does not depend on rule order, except for the tie break between
actions of equal priority.
"""

import dataclasses
import datetime
import logging
import typing as t

from drainage_control_core.core.attributes import Attribute
from drainage_control_core.exceptions import RuleSyntaxError

from .arbiter import ActionArbiter, CommittedAction
from .builder import RuleBuilder
from .clauses import ClauseParser, IdLookup
from .modulation import ModulationEngine, Tables
from .premise import evaluate_premises
from .rule import Rule
from .tokenizer import iter_clause_lines
from .variables import Clock, StateOwner, VariableResolver

SECONDS_PER_MINUTE = 60


@dataclasses.dataclass
class ControlReport:
    """Outcome of the latest control step"""

    world_time: t.Optional[float] = None
    elapsed_hours: t.Optional[float] = None
    fired_rules: t.List[str] = dataclasses.field(default_factory=list)
    actions: t.List[CommittedAction] = dataclasses.field(default_factory=list)

    @property
    def changed_actions(self) -> t.List[CommittedAction]:
        return [action for action in self.actions if action.changed]


class ControlEngine:
    """Rule based control of the links of a drainage network

    :param state: The owner of the node and link values
    :param tables: Curves and time series used by modulated settings
    :param index: Lookup of object indices by id
    :param clock: The simulation clock
    :param logger: Logger for build errors and committed actions
    """

    def __init__(
        self,
        state: StateOwner,
        tables: Tables,
        index: IdLookup,
        clock: Clock,
        logger: t.Optional[logging.Logger] = None,
    ):
        self.logger = logger or logging.getLogger(__name__)
        self.resolver = VariableResolver(state, clock)
        self.modulation = ModulationEngine(self.resolver, tables)
        self.builder = RuleBuilder(
            ClauseParser(index, state.get_link_type, logger=self.logger), logger=self.logger
        )
        self.arbiter = ActionArbiter(self.resolver, self.modulation, logger=self.logger)
        self.report = ControlReport()

    @property
    def rules(self) -> t.List[Rule]:
        return self.builder.rules

    def build_rule(self, tokens: t.Sequence[str], line: t.Optional[int] = None):
        """Add a single clause line to the rules

        :raises RuleSyntaxError: when the line is invalid
        """
        self.builder.add_line(tokens, line)

    def finish_build(self) -> t.List[Rule]:
        return self.builder.finish()

    def build_rules(
        self, text: t.Union[str, t.Iterable[str]], strict: bool = False
    ) -> t.List[RuleSyntaxError]:
        """Build rules from control rule text and finish building.

        :param text: The rule text, as a single string or as separate lines
        :param strict: Raise the first syntax error instead of collecting it
        :returns: All syntax errors that were found. Invalid rules are skipped, the other
            rules are built
        """
        errors = []
        for lineno, tokens in iter_clause_lines(text):
            try:
                self.build_rule(tokens, lineno)
            except RuleSyntaxError as e:
                self._build_error(e, errors, strict)
        try:
            self.finish_build()
        except RuleSyntaxError as e:
            self._build_error(e, errors, strict)
        return errors

    def _build_error(self, error: RuleSyntaxError, errors: list, strict: bool):
        if strict:
            raise error
        self.logger.warning(f"Control rule error: {error}")
        errors.append(error)

    def evaluate_controls(self, step: float) -> t.List[CommittedAction]:
        """Evaluate all rules for the current simulation time and commit the resulting link
        settings. A rule that cannot be evaluated is logged and skipped.

        :param step: The control time step in seconds
        :returns: The committed actions
        """
        self.resolver.start_step()
        self.arbiter.clear()
        fired = []
        for rule in self.rules:
            try:
                holds = evaluate_premises(rule.premises, self.resolver)
            except Exception:
                self.logger.exception(f"Could not evaluate control rule {rule.id}")
                continue
            if holds:
                fired.append(rule.id)
                self.arbiter.enqueue(rule, rule.then_actions)
            else:
                self.arbiter.enqueue(rule, rule.else_actions)

        committed = self.arbiter.commit(step / SECONDS_PER_MINUTE)
        reading = self.resolver.reading
        self.report = ControlReport(
            world_time=reading.world_time,
            elapsed_hours=reading.elapsed_hours,
            fired_rules=fired,
            actions=[action for action in committed if not action.modulated],
        )
        self._log_actions(committed)
        return committed

    def _log_actions(self, committed: t.Iterable[CommittedAction]):
        timestamp = datetime.datetime.fromtimestamp(
            self.report.world_time, tz=datetime.timezone.utc
        ).strftime("%Y-%m-%d %H:%M:%S")
        for action in committed:
            message = (
                f"{timestamp}: link {action.link_id} {_describe(action)} "
                f"by control rule {action.rule_id}"
            )
            if action.modulated:
                self.logger.debug(message)
            elif action.changed:
                self.logger.info(message)


def _describe(action: CommittedAction) -> str:
    if action.attribute is Attribute.STATUS:
        return f"status changed to {'open' if action.value > 0 else 'closed'}"
    return f"setting changed to {action.value:.2f}"
