import dataclasses
import logging
import typing as t

from drainage_control_core.core.attributes import Attribute

from .actions import Action
from .modulation import ModulationEngine
from .rule import Rule
from .variables import VariableResolver


@dataclasses.dataclass
class CommittedAction:
    """A setting written to a link during a control step"""

    link: int
    link_id: str
    attribute: Attribute
    value: float
    rule_id: str
    modulated: bool = False
    changed: bool = False


@dataclasses.dataclass
class QueuedAction:
    priority: float
    order: int
    rule: Rule
    action: Action
    value: t.Optional[float] = None


class ActionArbiter:
    """Collects the actions of all rules during a control step and commits, per link and
    attribute, the one with the highest priority. Of actions with equal priority the one
    that was queued first wins. Since status and setting both control the target setting of
    a link, only one of them is committed per link, decided the same way.
    """

    def __init__(
        self,
        resolver: VariableResolver,
        modulation: ModulationEngine,
        logger: t.Optional[logging.Logger] = None,
    ):
        self.resolver = resolver
        self.modulation = modulation
        self.logger = logger or logging.getLogger(__name__)
        self.queue: t.List[QueuedAction] = []

    def clear(self):
        self.queue.clear()

    def enqueue(self, rule: Rule, actions: t.Iterable[Action]):
        for action in actions:
            self.queue.append(QueuedAction(rule.priority, len(self.queue), rule, action))

    def commit(self, step_minutes: float) -> t.List[CommittedAction]:
        """Calculate the settings of all queued actions and write the winners to the network
        state. Every modulated action is calculated, also when it loses to another action, so
        that controller state keeps advancing.

        :param step_minutes: The control time step in minutes
        :returns: The committed actions, at most one per link, in the order their link was
            first targeted
        """
        winners: t.Dict[t.Tuple[int, Attribute], QueuedAction] = {}
        for queued in self.queue:
            try:
                queued.value = self.modulation.compute(queued.action, step_minutes)
            except Exception:
                self.logger.exception(
                    f"Could not calculate setting of {queued.action.link_id} in rule "
                    f"{queued.rule.id}"
                )
                continue
            key = (queued.action.link, queued.action.attribute)
            if _wins(queued, winners.get(key)):
                winners[key] = queued

        # STATUS and SETTING drive the same target setting of a link
        per_link: t.Dict[int, QueuedAction] = {}
        for queued in winners.values():
            if _wins(queued, per_link.get(queued.action.link)):
                per_link[queued.action.link] = queued

        committed = []
        for queued in per_link.values():
            action = queued.action
            previous = self.resolver.target_setting(action.link)
            self.resolver.apply(action.link, action.attribute, queued.value)
            committed.append(
                CommittedAction(
                    link=action.link,
                    link_id=action.link_id,
                    attribute=action.attribute,
                    value=queued.value,
                    rule_id=queued.rule.id,
                    modulated=action.is_modulated,
                    changed=previous != queued.value,
                )
            )
        self.clear()
        return committed


def _wins(candidate: QueuedAction, current: t.Optional[QueuedAction]) -> bool:
    if current is None or candidate.priority > current.priority:
        return True
    return candidate.priority == current.priority and candidate.order < current.order
