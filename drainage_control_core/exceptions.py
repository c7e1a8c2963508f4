import enum
import typing as t


class SimulationException(Exception):
    pass


class NotReady(SimulationException):
    pass


class RuleErrorCode(enum.Enum):
    RULE = "invalid rule clause sequence"
    ITEMS = "too few items"
    KEYWORD = "invalid keyword"
    NAME = "undefined object"
    NUMBER = "invalid number"
    DATETIME = "invalid date/time"
    DUPLICATE = "duplicate rule id"
    INCOMPLETE = "rule has no actions"
    OPERANDS = "mismatched premise operands"


class RuleSyntaxError(SimulationException):
    """Raised for a control rule line that cannot be added to its rule. The rule under
    construction is discarded, other rules are unaffected.
    """

    def __init__(
        self,
        code: RuleErrorCode,
        token: t.Optional[str] = None,
        line: t.Optional[int] = None,
        rule_id: t.Optional[str] = None,
    ):
        self.code = code
        self.token = token
        self.line = line
        self.rule_id = rule_id
        super().__init__(self.format())

    def format(self) -> str:
        message = self.code.value
        if self.token:
            message += f" '{self.token}'"
        if self.rule_id is not None:
            message += f" in rule '{self.rule_id}'"
        if self.line is not None:
            message += f" at line {self.line}"
        return message

    def tag(self, line: t.Optional[int] = None, rule_id: t.Optional[str] = None):
        if self.line is None:
            self.line = line
        if self.rule_id is None:
            self.rule_id = rule_id
        self.args = (self.format(),)
        return self


class UnresolvedReference(RuleSyntaxError):
    def __init__(self, token: str, **kwargs):
        super().__init__(RuleErrorCode.NAME, token, **kwargs)
