"""Critical rules every recorded at-bat must satisfy.

Each factory returns an independent ValidationRule; `create_all_critical_rules`
lists them in the order the engine runs them.
"""
from __future__ import annotations

from collections import Counter
from typing import Dict, List

from ..values.bases import Base
from ..values.results import BattingResult
from ..values.violations import AtBatValidationData, RuleViolation, ValidationResult, ViolationType
from .rule_engine import ConfigurableRuleEngine, ValidationRule

NO_RUNNER_PASSING = "no-runner-passing"
RBI_VALIDATION = "rbi-validation"
MAX_OUTS_VALIDATION = "max-outs-validation"
BASE_ADVANCEMENT_VALIDATION = "base-advancement-validation"
HIT_TYPE_VALIDATION = "hit-type-validation"

MAX_OUTS = 3


def _result(violations: List[RuleViolation]) -> ValidationResult:
    return ValidationResult.invalid(violations) if violations else ValidationResult.valid()


def _start_bases(data: AtBatValidationData) -> Dict[str, int]:
    starts = {rid: int(b) for rid, b in data.before_state.positions().items()}
    starts.setdefault(data.batter_id, 0)
    return starts


def _check_no_runner_passing(data: AtBatValidationData) -> ValidationResult:
    starts = _start_bases(data)
    finish = {rid: int(b) for rid, b in data.after_state.positions().items()}
    scored = set(data.runs_scored)
    ordered = sorted(starts, key=starts.get)

    violations: List[RuleViolation] = []
    for i, trailer in enumerate(ordered):
        for leader in ordered[i + 1:]:
            if trailer in finish and leader in finish and finish[trailer] > finish[leader]:
                violations.append(
                    RuleViolation(
                        type=ViolationType.RUNNER_ORDER_VIOLATION,
                        message=f"Runner {trailer} cannot pass runner {leader}",
                        rule_id=NO_RUNNER_PASSING,
                    )
                )
            elif trailer in scored and leader in finish:
                violations.append(
                    RuleViolation(
                        type=ViolationType.RUNNER_PASSING_VIOLATION,
                        message=f"Runner {trailer} cannot score while runner {leader} is still on "
                        f"{Base(finish[leader]).label}",
                        rule_id=NO_RUNNER_PASSING,
                    )
                )
    return _result(violations)


def _check_rbis(data: AtBatValidationData) -> ValidationResult:
    runs = len(data.runs_scored)
    if data.rbis < 0 or data.rbis > runs:
        return ValidationResult.invalid(
            RuleViolation(
                type=ViolationType.INCORRECT_RBI_COUNT,
                message=f"RBI count ({data.rbis}) cannot exceed runs scored ({runs}) or be negative",
                rule_id=RBI_VALIDATION,
            )
        )
    return ValidationResult.valid()


def _check_max_outs(data: AtBatValidationData) -> ValidationResult:
    if data.outs < 0 or data.outs > MAX_OUTS:
        return ValidationResult.invalid(
            RuleViolation(
                type=ViolationType.EXCESSIVE_OUTS,
                message=f"Cannot record {data.outs} outs on a single at-bat (must be 0-{MAX_OUTS})",
                rule_id=MAX_OUTS_VALIDATION,
            )
        )
    return ValidationResult.valid()


def _check_base_advancement(data: AtBatValidationData) -> ValidationResult:
    result = data.result
    if result is None:
        # Reported by the hit-type rule.
        return ValidationResult.valid()

    before, after = data.before_state, data.after_state
    batter = data.batter_id
    problems: List[str] = []

    before_dupes = [rid for rid, n in Counter(before.runners()).items() if n > 1]
    if before_dupes:
        problems.append(f"Runner(s) {', '.join(before_dupes)} started on more than one base")

    if batter in before.runners():
        problems.append(f"Batter {batter} cannot already be on base before the at-bat")

    dupes = [rid for rid, n in Counter(after.runners()).items() if n > 1]
    if dupes:
        problems.append(f"Runner(s) {', '.join(dupes)} occupy more than one base")

    repeat_scorers = [rid for rid, n in Counter(data.runs_scored).items() if n > 1]
    if repeat_scorers:
        problems.append(f"Runner(s) {', '.join(repeat_scorers)} scored more than once")

    on_base = set(after.runners())
    scored = set(data.runs_scored)
    both = sorted(on_base & scored)
    if both:
        problems.append(f"Runner(s) {', '.join(both)} both scored and remain on base")

    known = set(before.runners()) | {batter}
    strangers = sorted((on_base | scored) - known)
    if strangers:
        problems.append(f"Runner(s) {', '.join(strangers)} were neither on base nor batting")

    if result is BattingResult.HOME_RUN and not after.is_empty():
        problems.append(f"A home run must clear the bases, found {after}")

    finish = after.positions()
    for rid, start in before.positions().items():
        end = finish.get(rid)
        if end is not None and end < start:
            problems.append(f"Runner {rid} moved back from {start.label} to {end.label}")

    batter_end = finish.get(batter)
    if batter_end is not None:
        if result.batter_base is None:
            problems.append(f"Batter {batter} cannot remain on base after {result.value}")
        elif batter_end < result.batter_base:
            problems.append(
                f"Batter {batter} must reach at least {result.batter_base.label} on {result.value}, "
                f"found on {batter_end.label}"
            )

    vanished = [rid for rid in list(before.runners()) + [batter] if rid not in on_base and rid not in scored]
    if len(vanished) > max(data.outs, 0):
        problems.append(
            f"{len(vanished)} runner(s) left the bases without scoring but only {data.outs} out(s) recorded"
        )

    return _result(
        [
            RuleViolation(type=ViolationType.INVALID_BASE_ADVANCEMENT, message=msg, rule_id=BASE_ADVANCEMENT_VALIDATION)
            for msg in problems
        ]
    )


def _check_hit_type(data: AtBatValidationData) -> ValidationResult:
    result = data.result
    if result is None:
        return ValidationResult.invalid(
            RuleViolation(
                type=ViolationType.INVALID_HIT_TYPE,
                message=f"Invalid batting result: {data.result_code}",
                rule_id=HIT_TYPE_VALIDATION,
            )
        )
    if result is BattingResult.STRIKEOUT and data.outs == 0:
        return ValidationResult.invalid(
            RuleViolation(
                type=ViolationType.INVALID_HIT_TYPE,
                message="A strikeout must record at least one out",
                rule_id=HIT_TYPE_VALIDATION,
            )
        )
    return ValidationResult.valid()


def create_no_runner_passing_rule() -> ValidationRule:
    return ValidationRule(
        NO_RUNNER_PASSING, "No Runner Passing", "Trailing runner cannot pass a lead runner", "critical",
        _check_no_runner_passing,
    )


def create_rbi_validation_rule() -> ValidationRule:
    return ValidationRule(
        RBI_VALIDATION, "RBI Validation", "RBI count cannot exceed runs scored", "critical", _check_rbis,
    )


def create_max_outs_validation_rule() -> ValidationRule:
    return ValidationRule(
        MAX_OUTS_VALIDATION, "Maximum Outs Validation", "Cannot record more than 3 outs on a single at-bat",
        "critical", _check_max_outs,
    )


def create_base_advancement_validation_rule() -> ValidationRule:
    return ValidationRule(
        BASE_ADVANCEMENT_VALIDATION, "Base Advancement Validation",
        "After-state must honour the batting result's guarantees", "critical", _check_base_advancement,
    )


def create_hit_type_validation_rule() -> ValidationRule:
    return ValidationRule(
        HIT_TYPE_VALIDATION, "Hit Type Validation", "Batting result must be a known code consistent with the outs",
        "critical", _check_hit_type,
    )


def create_all_critical_rules() -> List[ValidationRule]:
    return [
        create_no_runner_passing_rule(),
        create_rbi_validation_rule(),
        create_max_outs_validation_rule(),
        create_base_advancement_validation_rule(),
        create_hit_type_validation_rule(),
    ]


def register_with_engine(engine: ConfigurableRuleEngine) -> ConfigurableRuleEngine:
    for rule in create_all_critical_rules():
        engine.register_rule(rule)
    return engine
