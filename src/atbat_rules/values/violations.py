from __future__ import annotations

from enum import Enum
from typing import Iterable, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict

from .bases import BaserunnerState
from .outcomes import AdvancementOutcome
from .results import BattingResult


class ViolationType(str, Enum):
    RUNNER_ORDER_VIOLATION = "RUNNER_ORDER_VIOLATION"
    RUNNER_PASSING_VIOLATION = "RUNNER_PASSING_VIOLATION"
    INCORRECT_RBI_COUNT = "INCORRECT_RBI_COUNT"
    EXCESSIVE_OUTS = "EXCESSIVE_OUTS"
    INVALID_BASE_ADVANCEMENT = "INVALID_BASE_ADVANCEMENT"
    INVALID_HIT_TYPE = "INVALID_HIT_TYPE"


class RuleViolation(BaseModel):
    type: ViolationType
    message: str
    rule_id: Optional[str] = None

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"Rule Violation [{self.type.value}]: {self.message}"


class ValidationResult(BaseModel):
    """Outcome of validating one at-bat. Built per call, never persisted."""

    violations: Tuple[RuleViolation, ...] = ()
    suggested_outcomes: Tuple[AdvancementOutcome, ...] = ()

    model_config = ConfigDict(frozen=True)

    @property
    def is_valid(self) -> bool:
        return not self.violations

    @classmethod
    def valid(cls) -> "ValidationResult":
        return cls()

    @classmethod
    def invalid(
        cls,
        violations: Union[RuleViolation, Iterable[RuleViolation]],
        suggestions: Iterable[AdvancementOutcome] = (),
    ) -> "ValidationResult":
        if isinstance(violations, RuleViolation):
            violations = (violations,)
        return cls(violations=tuple(violations), suggested_outcomes=tuple(suggestions))

    def has_violation_type(self, vtype: ViolationType) -> bool:
        return any(v.type == vtype for v in self.violations)

    @property
    def first_violation(self) -> Optional[RuleViolation]:
        return self.violations[0] if self.violations else None


class AtBatValidationData(BaseModel):
    """A confirmed at-bat as handed to the validation engine.

    `batting_result` keeps a raw string when the code is unknown so the
    hit-type rule can report it instead of construction failing.
    """

    before_state: BaserunnerState
    after_state: BaserunnerState
    batting_result: Union[BattingResult, str]
    batter_id: str
    rbis: int = 0
    outs: int = 0
    runs_scored: Tuple[str, ...] = ()

    model_config = ConfigDict(frozen=True)

    @property
    def result(self) -> Optional[BattingResult]:
        return BattingResult.parse(self.batting_result)

    @property
    def result_code(self) -> str:
        r = self.batting_result
        return r.value if isinstance(r, BattingResult) else str(r)


AtBatValidationScenario = AtBatValidationData
