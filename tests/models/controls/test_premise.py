import itertools

import pytest

from drainage_control_core.core.attributes import Attribute, ObjectType
from drainage_control_core.models.controls.premise import (
    ClauseKind,
    Premise,
    RelationalOperator,
    evaluate_premises,
)
from drainage_control_core.models.controls.variables import Variable


class FakeResolver:
    def __init__(self, values):
        self.values = values
        self.resolved = []

    def resolve(self, variable):
        self.resolved.append(variable.index)
        return self.values[variable.index]


def premise(kind, index, relation=RelationalOperator.GT, rhs=0.0):
    return Premise(
        kind=kind,
        lhs=Variable(ObjectType.NODE, index, Attribute.DEPTH),
        relation=relation,
        rhs=rhs,
    )


class TestRelationalOperator:
    @pytest.mark.parametrize(
        "relation, left, right, expected",
        [
            (RelationalOperator.EQ, 1.0, 1.0, True),
            (RelationalOperator.EQ, 1.0, 1.0000001, False),
            (RelationalOperator.NE, 1.0, 2.0, True),
            (RelationalOperator.NE, 1.0, 1.0, False),
            (RelationalOperator.LT, 1.0, 2.0, True),
            (RelationalOperator.LT, 2.0, 2.0, False),
            (RelationalOperator.LE, 2.0, 2.0, True),
            (RelationalOperator.LE, 2.1, 2.0, False),
            (RelationalOperator.GT, 3.0, 2.0, True),
            (RelationalOperator.GT, 2.0, 2.0, False),
            (RelationalOperator.GE, 2.0, 2.0, True),
            (RelationalOperator.GE, 1.9, 2.0, False),
        ],
    )
    def test_evaluate(self, relation, left, right, expected):
        assert relation.evaluate(left, right) is expected

    @pytest.mark.parametrize("relation", list(RelationalOperator))
    def test_undefined_operand_is_false(self, relation):
        assert not relation.evaluate(None, 1.0)
        assert not relation.evaluate(1.0, None)
        assert not relation.evaluate(None, None)

    @pytest.mark.parametrize(
        "token, expected",
        [
            ("=", RelationalOperator.EQ),
            ("==", RelationalOperator.EQ),
            ("<>", RelationalOperator.NE),
            ("!=", RelationalOperator.NE),
            ("<", RelationalOperator.LT),
            ("<=", RelationalOperator.LE),
            (">", RelationalOperator.GT),
            (">=", RelationalOperator.GE),
        ],
    )
    def test_from_token(self, token, expected):
        assert RelationalOperator.from_token(token) is expected

    def test_invalid_token(self):
        with pytest.raises(ValueError):
            RelationalOperator.from_token("=>")


class TestPremise:
    def test_literal_rhs(self):
        resolver = FakeResolver([2.0])
        assert premise(ClauseKind.IF, 0, rhs=1.5).evaluate(resolver)
        assert not premise(ClauseKind.IF, 0, rhs=2.5).evaluate(resolver)

    def test_variable_rhs(self):
        resolver = FakeResolver([2.0, 3.0])
        rhs = Variable(ObjectType.NODE, 1, Attribute.DEPTH)
        assert premise(ClauseKind.IF, 0, RelationalOperator.LT, rhs).evaluate(resolver)
        assert not premise(ClauseKind.IF, 0, RelationalOperator.GT, rhs).evaluate(resolver)

    def test_undefined_variable(self):
        resolver = FakeResolver([None])
        assert not premise(ClauseKind.IF, 0, RelationalOperator.NE, 1.0).evaluate(resolver)


def condition(kinds):
    return [premise(kind, i) for i, kind in enumerate(kinds)]


class TestEvaluatePremises:
    def test_single_premise(self):
        assert evaluate_premises(condition([ClauseKind.IF]), FakeResolver([1.0]))
        assert not evaluate_premises(condition([ClauseKind.IF]), FakeResolver([0.0]))

    @pytest.mark.parametrize("values", list(itertools.product([0.0, 1.0], repeat=4)))
    def test_and_binds_stronger_than_or(self, values):
        kinds = [ClauseKind.IF, ClauseKind.AND, ClauseKind.OR, ClauseKind.AND]
        p1, p2, p3, p4 = (v > 0 for v in values)
        expected = (p1 and p2) or (p3 and p4)
        assert evaluate_premises(condition(kinds), FakeResolver(list(values))) is expected

    @pytest.mark.parametrize("values", list(itertools.product([0.0, 1.0], repeat=3)))
    def test_or_of_single_premises(self, values):
        kinds = [ClauseKind.IF, ClauseKind.OR, ClauseKind.OR]
        assert evaluate_premises(condition(kinds), FakeResolver(list(values))) is any(
            v > 0 for v in values
        )

    def test_evaluates_every_premise(self):
        kinds = [ClauseKind.IF, ClauseKind.AND, ClauseKind.OR, ClauseKind.AND]
        resolver = FakeResolver([1.0, 1.0, 0.0, 0.0])
        assert evaluate_premises(condition(kinds), resolver)
        assert resolver.resolved == [0, 1, 2, 3]

    def test_evaluates_every_premise_of_false_group(self):
        kinds = [ClauseKind.IF, ClauseKind.AND, ClauseKind.AND]
        resolver = FakeResolver([0.0, 1.0, 1.0])
        assert not evaluate_premises(condition(kinds), resolver)
        assert resolver.resolved == [0, 1, 2]

    def test_empty_condition_is_false(self):
        assert not evaluate_premises([], FakeResolver([]))
