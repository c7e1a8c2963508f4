"""Construction of control rules from clause lines.

Rules are built one clause line at a time by a small state machine. The state is the
keyword of the last accepted clause; a clause that is not allowed in the current state puts
the builder in the ``ERROR`` state, in which all lines up to the next ``RULE`` are skipped.
"""

import dataclasses
import enum
import logging
import typing as t

from drainage_control_core.exceptions import RuleErrorCode, RuleSyntaxError

from .clauses import ClauseParser, RuleKeyword, parse_number
from .premise import ClauseKind
from .rule import Rule


class BuildState(enum.Enum):
    RULE = "RULE"
    IF = "IF"
    AND = "AND"
    OR = "OR"
    THEN = "THEN"
    ELSE = "ELSE"
    PRIORITY = "PRIORITY"
    ERROR = "ERROR"


class Branch(enum.Enum):
    THEN = "THEN"
    ELSE = "ELSE"


_PREMISE_STATES = (BuildState.IF, BuildState.AND, BuildState.OR)
_ACTION_STATES = (BuildState.THEN, BuildState.AND, BuildState.ELSE)


@dataclasses.dataclass
class BuildSession:
    """The rule under construction. ``rule`` is ``None`` outside of a rule, ``branch`` is
    the action list that ``AND`` clauses append to once the premises are done.
    """

    state: t.Optional[BuildState] = None
    rule: t.Optional[Rule] = None
    branch: t.Optional[Branch] = None

    def start(self, rule: Rule):
        self.state = BuildState.RULE
        self.rule = rule
        self.branch = None

    def close(self, state: BuildState):
        self.state = state
        self.rule = None
        self.branch = None

    @property
    def rule_id(self) -> t.Optional[str]:
        return self.rule.id if self.rule is not None else None


class RuleBuilder:
    """Builds :class:`Rule` objects from tokenized clause lines. Finished rules are kept in
    :attr:`rules` in the order they appear in the input.

    :param parser: A :class:`ClauseParser` to parse premises and actions with
    :param logger: Logger to report warnings to
    """

    def __init__(self, parser: ClauseParser, logger: t.Optional[logging.Logger] = None):
        self.parser = parser
        self.logger = logger or logging.getLogger(__name__)
        self.rules: t.List[Rule] = []
        self.session = BuildSession()
        self._handlers = {
            RuleKeyword.IF: self._add_if,
            RuleKeyword.AND: self._add_and,
            RuleKeyword.OR: self._add_or,
            RuleKeyword.THEN: self._add_then,
            RuleKeyword.ELSE: self._add_else,
            RuleKeyword.PRIORITY: self._add_priority,
        }

    @property
    def rule_ids(self) -> t.Set[str]:
        ids = {rule.id for rule in self.rules}
        if self.session.rule is not None:
            ids.add(self.session.rule.id)
        return ids

    def add_line(self, tokens: t.Sequence[str], line: t.Optional[int] = None):
        """Add a single clause line to the rule under construction

        :param tokens: The tokens of the line, the first being the clause keyword
        :param line: The line number, used in error messages
        :raises RuleSyntaxError: when the line is invalid or out of sequence. The rule under
            construction is discarded
        """
        if not tokens:
            return
        keyword = RuleKeyword.find(tokens[0])
        if keyword is RuleKeyword.RULE:
            self._start_rule(tokens, line)
            return
        if self.session.state is BuildState.ERROR:
            return

        rule_id = self.session.rule_id
        try:
            if keyword is None:
                raise RuleSyntaxError(RuleErrorCode.KEYWORD, tokens[0])
            if self.session.rule is None:
                raise RuleSyntaxError(RuleErrorCode.RULE, tokens[0])
            self._handlers[keyword](tokens)
        except RuleSyntaxError as e:
            self.session.close(BuildState.ERROR)
            raise e.tag(line, rule_id)

    def finish(self) -> t.List[Rule]:
        """Finish building. The last rule is finalized when it is complete

        :returns: All rules that were built successfully
        :raises RuleSyntaxError: when the last rule has no actions
        """
        error = self._finalize()
        self.session = BuildSession()
        if error is not None:
            raise error
        return self.rules

    def _start_rule(self, tokens: t.Sequence[str], line: t.Optional[int]):
        rule_error = None
        if len(tokens) != 2:
            rule_error = RuleSyntaxError(
                RuleErrorCode.ITEMS, tokens[-1] if len(tokens) > 2 else None, line=line
            )
        elif tokens[1] in self.rule_ids:
            rule_error = RuleSyntaxError(
                RuleErrorCode.DUPLICATE, tokens[1], line=line, rule_id=tokens[1]
            )

        incomplete = self._finalize()
        if rule_error is not None:
            self.session.close(BuildState.ERROR)
            if incomplete is not None:
                self.logger.warning(str(incomplete))
            raise rule_error

        self.session.start(Rule(id=tokens[1], position=len(self.rules), line=line))
        if incomplete is not None:
            raise incomplete

    def _finalize(self) -> t.Optional[RuleSyntaxError]:
        """Close the rule under construction, keeping it only when it has actions"""
        rule = self.session.rule
        if rule is None:
            return None
        self.session.close(BuildState.PRIORITY)
        if not rule.then_actions:
            return RuleSyntaxError(RuleErrorCode.INCOMPLETE, line=rule.line, rule_id=rule.id)
        self.rules.append(rule)
        return None

    def _invalid(self, tokens: t.Sequence[str]):
        raise RuleSyntaxError(RuleErrorCode.RULE, tokens[0])

    def _add_premise(self, kind: ClauseKind, tokens: t.Sequence[str]):
        self.session.rule.premises.append(self.parser.parse_premise(kind, tokens))

    def _add_action(self, tokens: t.Sequence[str]):
        rule = self.session.rule
        action = self.parser.parse_action(tokens, rule.premises[-1])
        if self.session.branch is Branch.THEN:
            rule.then_actions.append(action)
        else:
            rule.else_actions.append(action)

    def _add_if(self, tokens: t.Sequence[str]):
        if self.session.state is not BuildState.RULE:
            self._invalid(tokens)
        self._add_premise(ClauseKind.IF, tokens)
        self.session.state = BuildState.IF

    def _add_and(self, tokens: t.Sequence[str]):
        if self.session.branch is None and self.session.state in _PREMISE_STATES:
            self._add_premise(ClauseKind.AND, tokens)
        elif self.session.branch is not None and self.session.state in _ACTION_STATES:
            self._add_action(tokens)
        else:
            self._invalid(tokens)
        self.session.state = BuildState.AND

    def _add_or(self, tokens: t.Sequence[str]):
        if self.session.branch is not None or self.session.state not in _PREMISE_STATES:
            self._invalid(tokens)
        self._add_premise(ClauseKind.OR, tokens)
        self.session.state = BuildState.OR

    def _add_then(self, tokens: t.Sequence[str]):
        if self.session.branch is not None or self.session.state not in _PREMISE_STATES:
            self._invalid(tokens)
        self.session.branch = Branch.THEN
        self._add_action(tokens)
        self.session.state = BuildState.THEN

    def _add_else(self, tokens: t.Sequence[str]):
        if self.session.branch is not Branch.THEN or self.session.state not in _ACTION_STATES:
            self._invalid(tokens)
        self.session.branch = Branch.ELSE
        self._add_action(tokens)
        self.session.state = BuildState.ELSE

    def _add_priority(self, tokens: t.Sequence[str]):
        if self.session.branch is None or self.session.state not in _ACTION_STATES:
            self._invalid(tokens)
        if len(tokens) != 2:
            raise RuleSyntaxError(RuleErrorCode.ITEMS, tokens[-1] if len(tokens) > 2 else None)
        self.session.rule.priority = parse_number(tokens[1])
        self._finalize()
