"""Parsing of the premise and action clauses of control rules.

Premises have the form ``<kw> <object> <id> <attribute> <relation> <value>`` or
``<kw> <object> <id> <attribute> <relation> <object> <id> <attribute>``, eg.::

    IF NODE N1 DEPTH > 4.5
    AND NODE N2 DEPTH < NODE N1 DEPTH
    OR SIMULATION CLOCKTIME >= 08:00

Actions have the form ``<kw> <object> <id> <attribute> = <setting>``, eg.::

    THEN PUMP P1 STATUS = ON
    AND WEIR W1 SETTING = 0.5
    ELSE ORIFICE O1 SETTING = CURVE C1
"""

import enum
import logging
import math
import typing as t

from drainage_control_core.core.attributes import (
    OBJECT_LINK_TYPES,
    SIMULATION_ATTRIBUTES,
    Attribute,
    LinkType,
    ObjectType,
)
from drainage_control_core.core.index import NOT_FOUND, ObjectKind
from drainage_control_core.exceptions import RuleErrorCode, RuleSyntaxError, UnresolvedReference
from drainage_control_core.utils.time import parse_date_ordinal, parse_day_of_year, parse_hours

from .actions import Action, CurveSetting, FixedSetting, PidSetting, SettingMode, TimeSeriesSetting
from .premise import ClauseKind, Operand, Premise, RelationalOperator
from .variables import Variable


class RuleKeyword(enum.Enum):
    RULE = "RULE"
    IF = "IF"
    AND = "AND"
    OR = "OR"
    THEN = "THEN"
    ELSE = "ELSE"
    PRIORITY = "PRIORITY"

    @classmethod
    def find(cls, token: str) -> t.Optional["RuleKeyword"]:
        return cls.__members__.get(token.upper())


class IdLookup(t.Protocol):
    def find_index(self, kind: ObjectKind, ident: str) -> int:
        ...


_NODE_ATTRIBUTES = {Attribute.DEPTH, Attribute.HEAD, Attribute.VOLUME, Attribute.INFLOW}
_LINK_TIME_ATTRIBUTES = {Attribute.TIMEOPEN, Attribute.TIMECLOSED}
_VALID_ATTRIBUTES = {
    ObjectType.NODE: _NODE_ATTRIBUTES,
    ObjectType.LINK: {Attribute.STATUS, Attribute.DEPTH, Attribute.FLOW},
    ObjectType.CONDUIT: {Attribute.STATUS, Attribute.DEPTH, Attribute.FLOW},
    ObjectType.PUMP: {Attribute.STATUS, Attribute.FLOW},
    ObjectType.ORIFICE: {Attribute.SETTING},
    ObjectType.WEIR: {Attribute.SETTING},
    ObjectType.OUTLET: {Attribute.SETTING},
    ObjectType.SIMULATION: SIMULATION_ATTRIBUTES,
}

# attributes can only be compared to attributes of the same category
_CATEGORIES = {
    Attribute.TIME: "time",
    Attribute.CLOCKTIME: "time",
    Attribute.TIMEOPEN: "time",
    Attribute.TIMECLOSED: "time",
    Attribute.DATE: "calendar",
    Attribute.DAY: "calendar",
    Attribute.MONTH: "calendar",
    Attribute.DAYOFYEAR: "calendar",
    Attribute.STATUS: "status",
}

_STATUS_WORDS = {"ON": 1.0, "OFF": 0.0, "OPEN": 1.0, "CLOSED": 0.0}
_PUMP_STATUS_WORDS = {"ON": 1.0, "OFF": 0.0}
_CONDUIT_STATUS_WORDS = {"OPEN": 1.0, "CLOSED": 0.0}


def _category(attribute: Attribute) -> str:
    return _CATEGORIES.get(attribute, "physical")


def _token(tokens: t.Sequence[str], n: int) -> str:
    if n >= len(tokens):
        raise RuleSyntaxError(RuleErrorCode.ITEMS)
    return tokens[n]


def parse_number(token: str) -> float:
    try:
        value = float(token)
    except ValueError:
        raise RuleSyntaxError(RuleErrorCode.NUMBER, token) from None
    if not math.isfinite(value):
        raise RuleSyntaxError(RuleErrorCode.NUMBER, token)
    return value


def _find_enum(enum_cls, token: str):
    try:
        return enum_cls[token.upper()]
    except KeyError:
        raise RuleSyntaxError(RuleErrorCode.KEYWORD, token) from None


def parse_premise_value(token: str, attribute: Attribute) -> float:
    """Parse the literal right hand side of a premise, in the units of ``attribute``"""
    if attribute is Attribute.STATUS:
        try:
            return _STATUS_WORDS[token.upper()]
        except KeyError:
            raise RuleSyntaxError(RuleErrorCode.KEYWORD, token) from None
    try:
        if attribute in (
            Attribute.TIME,
            Attribute.CLOCKTIME,
            Attribute.TIMEOPEN,
            Attribute.TIMECLOSED,
        ):
            return parse_hours(token)
        if attribute is Attribute.DATE:
            return float(parse_date_ordinal(token))
        if attribute is Attribute.DAYOFYEAR:
            return float(parse_day_of_year(token))
    except ValueError:
        raise RuleSyntaxError(RuleErrorCode.DATETIME, token) from None

    value = parse_number(token)
    if attribute is Attribute.DAY and not (value.is_integer() and 1 <= value <= 7):
        raise RuleSyntaxError(RuleErrorCode.DATETIME, token)
    if attribute is Attribute.MONTH and not (value.is_integer() and 1 <= value <= 12):
        raise RuleSyntaxError(RuleErrorCode.DATETIME, token)
    return value


class ClauseParser:
    """Turns the tokens of premise and action clauses into :class:`Premise` and
    :class:`Action` objects, resolving object ids to indices
    """

    def __init__(
        self,
        lookup: IdLookup,
        link_type: t.Callable[[int], LinkType],
        logger: t.Optional[logging.Logger] = None,
    ):
        self.lookup = lookup
        self.link_type = link_type
        self.logger = logger or logging.getLogger(__name__)

    def _find(self, kind: ObjectKind, ident: str) -> int:
        index = self.lookup.find_index(kind, ident)
        if index == NOT_FOUND:
            raise UnresolvedReference(ident)
        return index

    def parse_variable(self, tokens: t.Sequence[str], n: int) -> t.Tuple[Variable, int]:
        """Parse a variable starting at token ``n``

        :returns: The variable and the position of the first token after the variable
        """
        object_type = _find_enum(ObjectType, _token(tokens, n))
        n += 1
        if object_type is ObjectType.NODE:
            index = self._find(ObjectKind.NODE, _token(tokens, n))
            n += 1
        elif object_type.is_link:
            index = self._find(ObjectKind.LINK, _token(tokens, n))
            n += 1
        else:
            index = NOT_FOUND

        attr_token = _token(tokens, n)
        attribute = _find_enum(Attribute, attr_token)
        valid = _VALID_ATTRIBUTES[object_type]
        if object_type.is_link:
            valid = valid | _LINK_TIME_ATTRIBUTES
        if attribute not in valid:
            raise RuleSyntaxError(RuleErrorCode.KEYWORD, attr_token)
        return Variable(object_type, index, attribute), n + 1

    def parse_premise(self, kind: ClauseKind, tokens: t.Sequence[str]) -> Premise:
        if len(tokens) < 5:
            raise RuleSyntaxError(RuleErrorCode.ITEMS)
        lhs, n = self.parse_variable(tokens, 1)

        relation_token = _token(tokens, n)
        try:
            relation = RelationalOperator.from_token(relation_token)
        except ValueError:
            raise RuleSyntaxError(RuleErrorCode.KEYWORD, relation_token) from None
        n += 1

        rhs: Operand
        rhs_token = _token(tokens, n)
        if rhs_token.upper() in ObjectType.__members__:
            rhs, n = self.parse_variable(tokens, n)
            self._check_operands(lhs, rhs)
        else:
            rhs = parse_premise_value(rhs_token, lhs.attribute)
            n += 1

        self._check_exhausted(tokens, n)
        return Premise(kind=kind, lhs=lhs, relation=relation, rhs=rhs)

    def _check_operands(self, lhs: Variable, rhs: Variable):
        if _category(lhs.attribute) != _category(rhs.attribute):
            raise RuleSyntaxError(RuleErrorCode.OPERANDS, rhs.attribute.name)
        if lhs.attribute is not rhs.attribute:
            self.logger.warning(
                f"premise compares {lhs.attribute.name} to {rhs.attribute.name}"
            )

    def parse_action(
        self, tokens: t.Sequence[str], controller: t.Optional[Premise] = None
    ) -> Action:
        """Parse an action clause

        :param tokens: The tokens of the clause, including its keyword
        :param controller: The premise whose variables drive curve and PID settings, usually
            the last premise of the rule
        """
        if len(tokens) < 6:
            raise RuleSyntaxError(RuleErrorCode.ITEMS)

        object_type = _find_enum(ObjectType, tokens[1])
        if object_type not in OBJECT_LINK_TYPES:
            raise RuleSyntaxError(RuleErrorCode.KEYWORD, tokens[1])
        link = self._find(ObjectKind.LINK, tokens[2])
        if self.link_type(link) is not OBJECT_LINK_TYPES[object_type]:
            raise RuleSyntaxError(RuleErrorCode.NAME, tokens[2])

        attribute = _find_enum(Attribute, tokens[3])
        if tokens[4] != "=":
            raise RuleSyntaxError(RuleErrorCode.KEYWORD, tokens[4])

        if attribute is Attribute.STATUS and object_type is ObjectType.CONDUIT:
            mode, n = self._status_setting(tokens, _CONDUIT_STATUS_WORDS), 6
        elif attribute is Attribute.STATUS and object_type is ObjectType.PUMP:
            mode, n = self._status_setting(tokens, _PUMP_STATUS_WORDS), 6
        elif attribute is Attribute.SETTING and object_type is not ObjectType.CONDUIT:
            mode, n = self._setting(tokens, controller)
            if (
                isinstance(mode, FixedSetting)
                and object_type is not ObjectType.PUMP
                and not 0.0 <= mode.value <= 1.0
            ):
                raise RuleSyntaxError(RuleErrorCode.NUMBER, tokens[5])
        else:
            raise RuleSyntaxError(RuleErrorCode.KEYWORD, tokens[3])

        self._check_exhausted(tokens, n)
        return Action(link=link, link_id=tokens[2], attribute=attribute, mode=mode)

    @staticmethod
    def _status_setting(tokens: t.Sequence[str], words: t.Dict[str, float]) -> FixedSetting:
        try:
            return FixedSetting(words[tokens[5].upper()])
        except KeyError:
            raise RuleSyntaxError(RuleErrorCode.KEYWORD, tokens[5]) from None

    def _setting(
        self, tokens: t.Sequence[str], controller: t.Optional[Premise]
    ) -> t.Tuple[SettingMode, int]:
        setting_type = tokens[5].upper()
        if setting_type == "CURVE":
            curve = self._find(ObjectKind.CURVE, _token(tokens, 6))
            return CurveSetting(curve, self._controller(controller).lhs), 7
        if setting_type == "TIMESERIES":
            series = self._find(ObjectKind.TIMESERIES, _token(tokens, 6))
            return TimeSeriesSetting(series), 7
        if setting_type == "PID":
            kp, ki, kd = (parse_number(_token(tokens, n)) for n in range(6, 9))
            premise = self._controller(controller)
            return PidSetting(premise.lhs, premise.rhs, kp, ki, kd), 9
        return FixedSetting(parse_number(tokens[5])), 6

    @staticmethod
    def _controller(controller: t.Optional[Premise]) -> Premise:
        if controller is None:
            raise RuleSyntaxError(RuleErrorCode.RULE)
        return controller

    @staticmethod
    def _check_exhausted(tokens: t.Sequence[str], n: int):
        if n >= len(tokens):
            return
        if RuleKeyword.find(tokens[n]) is not None:
            raise RuleSyntaxError(RuleErrorCode.RULE, tokens[n])
        raise RuleSyntaxError(RuleErrorCode.ITEMS, tokens[n])
