"""Premises of control rules and the evaluation of a rule's condition.

A condition is a sequence of premises joined by AND and OR. AND binds stronger than OR, so
``p1 AND p2 OR p3 AND p4`` is evaluated as ``(p1 AND p2) OR (p3 AND p4)``.
"""

import dataclasses
import enum
import operator
import typing as t

from .variables import Variable, VariableResolver


class ClauseKind(enum.Enum):
    IF = "IF"
    AND = "AND"
    OR = "OR"


class RelationalOperator(enum.Enum):
    EQ = "="
    NE = "<>"
    LT = "<"
    LE = "<="
    GT = ">"
    GE = ">="

    @classmethod
    def from_token(cls, token: str) -> "RelationalOperator":
        """Find the operator for a token. ``==`` and ``!=`` are accepted as aliases

        :raises ValueError: if the token is not a relational operator
        """
        token = {"==": "=", "!=": "<>"}.get(token, token)
        return cls(token)

    def evaluate(self, left: t.Optional[float], right: t.Optional[float]) -> bool:
        """Compare two values exactly. An undefined value never satisfies a relation"""
        if left is None or right is None:
            return False
        return _OPERATORS[self](left, right)


_OPERATORS: t.Dict[RelationalOperator, t.Callable[[float, float], bool]] = {
    RelationalOperator.EQ: operator.eq,
    RelationalOperator.NE: operator.ne,
    RelationalOperator.LT: operator.lt,
    RelationalOperator.LE: operator.le,
    RelationalOperator.GT: operator.gt,
    RelationalOperator.GE: operator.ge,
}

Operand = t.Union[float, Variable]


def resolve_operand(operand: Operand, resolver: VariableResolver) -> t.Optional[float]:
    if isinstance(operand, Variable):
        return resolver.resolve(operand)
    return operand


@dataclasses.dataclass(frozen=True)
class Premise:
    kind: ClauseKind
    lhs: Variable
    relation: RelationalOperator
    rhs: Operand

    def evaluate(self, resolver: VariableResolver) -> bool:
        rhs = resolve_operand(self.rhs, resolver)
        return self.relation.evaluate(resolver.resolve(self.lhs), rhs)


def evaluate_premises(premises: t.Sequence[Premise], resolver: VariableResolver) -> bool:
    """Evaluate a rule's condition. Every premise is evaluated, also when the outcome is
    already decided, so that all variables are read once per step.

    :param premises: The premises of a rule, the first one being an IF premise
    :param resolver: Resolver for the premise variables
    :returns: True if the condition holds
    """
    result = False
    group: t.Optional[bool] = None
    for premise in premises:
        value = premise.evaluate(resolver)
        if group is None:
            group = value
        elif premise.kind is ClauseKind.OR:
            result = result or group
            group = value
        else:
            group = group and value
    if group is not None:
        result = result or group
    return result
