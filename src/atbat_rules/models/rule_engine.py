from __future__ import annotations

import logging
from typing import Callable, Dict, List, Mapping, Optional

from ..values.violations import AtBatValidationData, RuleViolation, ValidationResult, ViolationType

logger = logging.getLogger(__name__)

RULE_CATEGORIES = ("critical", "configurable", "optional")


class ValidationRule:
    """A named check over one at-bat that can be switched on and off."""

    def __init__(
        self,
        rule_id: str,
        name: str,
        description: str,
        category: str,
        check: Callable[[AtBatValidationData], ValidationResult],
        enabled: bool = True,
    ):
        if category not in RULE_CATEGORIES:
            raise ValueError(f"Unknown rule category: {category}")
        self.id = rule_id
        self.name = name
        self.description = description
        self.category = category
        self.enabled = enabled
        self._check = check

    def validate(self, data: AtBatValidationData) -> ValidationResult:
        return self._check(data)

    def __repr__(self) -> str:
        state = "on" if self.enabled else "off"
        return f"ValidationRule({self.id!r}, {self.category}, {state})"


class ConfigurableRuleEngine:
    """Runs every enabled rule against an at-bat and merges the violations.

    Rules are kept in registration order. A rule that raises does not abort
    the run; it is reported as an INVALID_HIT_TYPE violation.
    """

    def __init__(self, rule_states: Optional[Mapping[str, bool]] = None, default_enabled: bool = True):
        self._rules: Dict[str, ValidationRule] = {}
        self._rule_states: Dict[str, bool] = dict(rule_states or {})
        self.default_enabled = default_enabled

    def register_rule(self, rule: ValidationRule) -> None:
        rule.enabled = self._rule_states.get(rule.id, self.default_enabled)
        self._rule_states[rule.id] = rule.enabled
        self._rules[rule.id] = rule

    def _get(self, rule_id: str) -> ValidationRule:
        try:
            return self._rules[rule_id]
        except KeyError:
            raise KeyError(f"Rule with ID '{rule_id}' not found") from None

    def enable_rule(self, rule_id: str) -> None:
        self._get(rule_id).enabled = True
        self._rule_states[rule_id] = True

    def disable_rule(self, rule_id: str) -> None:
        self._get(rule_id).enabled = False
        self._rule_states[rule_id] = False

    def is_rule_enabled(self, rule_id: str) -> bool:
        rule = self._rules.get(rule_id)
        return bool(rule and rule.enabled)

    @property
    def rules(self) -> List[ValidationRule]:
        return list(self._rules.values())

    @property
    def enabled_rules(self) -> List[ValidationRule]:
        return [r for r in self._rules.values() if r.enabled]

    def rules_by_category(self, category: str) -> List[ValidationRule]:
        return [r for r in self._rules.values() if r.category == category]

    def rule_states(self) -> Dict[str, bool]:
        return dict(self._rule_states)

    def clear_rules(self) -> None:
        self._rules.clear()
        self._rule_states.clear()

    def validate_at_bat(self, data: AtBatValidationData) -> ValidationResult:
        violations: List[RuleViolation] = []
        for rule in self.enabled_rules:
            try:
                res = rule.validate(data)
            except Exception as e:
                logger.exception("rule %s failed to execute", rule.id)
                violations.append(
                    RuleViolation(
                        type=ViolationType.INVALID_HIT_TYPE,
                        message=f"Rule '{rule.name}' failed to execute: {e}",
                        rule_id=rule.id,
                    )
                )
                continue
            if not res.is_valid:
                logger.debug("rule %s rejected %s at-bat: %s", rule.id, data.result_code, [v.message for v in res.violations])
                violations.extend(res.violations)
        return ValidationResult(violations=tuple(violations))
