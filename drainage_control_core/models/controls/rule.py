import dataclasses
import typing as t

from .actions import Action
from .premise import Premise


@dataclasses.dataclass
class Rule:
    """A control rule. ``position`` is the order in which the rule was built and breaks ties
    between rules of equal priority
    """

    id: str
    position: int = 0
    line: t.Optional[int] = None
    priority: float = 0.0
    premises: t.List[Premise] = dataclasses.field(default_factory=list)
    then_actions: t.List[Action] = dataclasses.field(default_factory=list)
    else_actions: t.List[Action] = dataclasses.field(default_factory=list)

    @property
    def actions(self) -> t.Iterator[Action]:
        yield from self.then_actions
        yield from self.else_actions
