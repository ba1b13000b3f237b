from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Union

from ..values.bases import BaserunnerState
from ..values.outcomes import AdvancementOutcome, OutcomeParameters
from ..values.results import BattingResult
from ..values.violations import AtBatValidationData, RuleViolation, ValidationResult, ViolationType
from .outcome_generator import OutcomeGenerator
from .rule_engine import ConfigurableRuleEngine, ValidationRule
from .validation_rules import register_with_engine

logger = logging.getLogger(__name__)

DEFAULT_BATTER_ID = "batter"


class RuleMatrixService:
    """Single entry point pairing the outcome generator with the rule engine.

    `validate_at_bat` first runs the registered rules; a transition that
    passes them must also match one of the generated outcomes. Failures come
    back with every valid outcome attached as a suggestion.
    """

    def __init__(self, rule_engine: Optional[ConfigurableRuleEngine] = None, generator: Optional[OutcomeGenerator] = None):
        if rule_engine is None:
            rule_engine = register_with_engine(ConfigurableRuleEngine())
        self.rule_engine = rule_engine
        self.generator = generator or OutcomeGenerator()

    def get_valid_outcomes(
        self, before: BaserunnerState, result: BattingResult, batter_id: str = DEFAULT_BATTER_ID
    ) -> List[AdvancementOutcome]:
        return self.generator.get_all_valid_outcomes(before, result, batter_id)

    def get_valid_outcomes_with_parameters(
        self,
        before: BaserunnerState,
        result: BattingResult,
        parameters: OutcomeParameters,
        batter_id: str = DEFAULT_BATTER_ID,
    ) -> List[AdvancementOutcome]:
        return self.generator.generate_valid_outcomes(before, result, batter_id, parameters)

    def validate_at_bat(
        self,
        before: BaserunnerState,
        after: BaserunnerState,
        result: Union[BattingResult, str],
        rbis: int,
        runs_scored: Sequence[str],
        outs: int = 0,
        batter_id: str = DEFAULT_BATTER_ID,
    ) -> ValidationResult:
        data = AtBatValidationData(
            before_state=before,
            after_state=after,
            batting_result=result,
            batter_id=batter_id,
            rbis=rbis,
            outs=outs,
            runs_scored=tuple(runs_scored),
        )
        checked = self.rule_engine.validate_at_bat(data)
        parsed = data.result
        suggestions = self.get_valid_outcomes(before, parsed, batter_id) if parsed is not None else []
        if not checked.is_valid:
            return ValidationResult.invalid(checked.violations, suggestions)

        # Disabled rules can let through counts no outcome could carry.
        if 0 <= rbis <= len(runs_scored) and 0 <= outs <= 3:
            proposed = AdvancementOutcome(
                after_state=after, rbis=rbis, runs_scored=tuple(runs_scored), outs=outs, description="Proposed"
            )
            if any(o.matches(proposed) for o in suggestions):
                return ValidationResult.valid()

        logger.debug("no generated outcome matches %s -> %s on %s", before, after, data.result_code)
        violation = RuleViolation(
            type=ViolationType.INVALID_BASE_ADVANCEMENT,
            message=f"Invalid transition from {before} to {after} with {data.result_code}",
        )
        return ValidationResult.invalid(violation, suggestions)

    def available_parameters(self) -> List[OutcomeParameters]:
        return OutcomeParameters.all_presets()

    def describe_parameters(self, parameters: OutcomeParameters) -> str:
        return parameters.describe()

    def enable_rule(self, rule_id: str) -> None:
        self.rule_engine.enable_rule(rule_id)

    def disable_rule(self, rule_id: str) -> None:
        self.rule_engine.disable_rule(rule_id)

    def is_rule_enabled(self, rule_id: str) -> bool:
        return self.rule_engine.is_rule_enabled(rule_id)

    def available_rules(self) -> List[ValidationRule]:
        return self.rule_engine.rules

    @staticmethod
    def base_configuration_key(state: BaserunnerState) -> str:
        return state.config_key()
