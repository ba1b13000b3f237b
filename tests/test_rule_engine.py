import pytest

from atbat_rules.models.rule_engine import ConfigurableRuleEngine, ValidationRule
from atbat_rules.models.validation_rules import MAX_OUTS_VALIDATION, register_with_engine
from atbat_rules.values.bases import BaserunnerState
from atbat_rules.values.violations import AtBatValidationData, ValidationResult, ViolationType


def _data(outs=0):
    return AtBatValidationData(
        before_state=BaserunnerState.empty(),
        after_state=BaserunnerState.empty(),
        batting_result="SO",
        batter_id="X",
        outs=outs,
    )


def test_disabled_rule_is_skipped():
    engine = register_with_engine(ConfigurableRuleEngine())
    assert not engine.validate_at_bat(_data(outs=4)).is_valid
    engine.disable_rule(MAX_OUTS_VALIDATION)
    assert not engine.is_rule_enabled(MAX_OUTS_VALIDATION)
    assert engine.validate_at_bat(_data(outs=4)).is_valid
    engine.enable_rule(MAX_OUTS_VALIDATION)
    assert engine.is_rule_enabled(MAX_OUTS_VALIDATION)


def test_rule_states_seed_registration():
    engine = register_with_engine(ConfigurableRuleEngine(rule_states={MAX_OUTS_VALIDATION: False}))
    assert not engine.is_rule_enabled(MAX_OUTS_VALIDATION)
    assert len(engine.enabled_rules) == len(engine.rules) - 1
    assert engine.rule_states()[MAX_OUTS_VALIDATION] is False


def test_unknown_rule_id():
    engine = ConfigurableRuleEngine()
    with pytest.raises(KeyError):
        engine.enable_rule("nope")
    assert not engine.is_rule_enabled("nope")


def test_new_rules_can_be_added_without_touching_callers():
    engine = register_with_engine(ConfigurableRuleEngine())
    engine.register_rule(
        ValidationRule(
            "no-empty-innings",
            "No Empty Innings",
            "Placeholder optional rule",
            "optional",
            lambda data: ValidationResult.valid(),
        )
    )
    assert [r.id for r in engine.rules_by_category("optional")] == ["no-empty-innings"]
    assert engine.validate_at_bat(_data(outs=1)).is_valid


def test_raising_rule_becomes_a_violation():
    def boom(data):
        raise RuntimeError("kaput")

    engine = ConfigurableRuleEngine()
    engine.register_rule(ValidationRule("boom", "Boom", "always raises", "configurable", boom))
    res = engine.validate_at_bat(_data(outs=1))
    assert not res.is_valid
    assert res.violations[0].type == ViolationType.INVALID_HIT_TYPE
    assert "kaput" in res.violations[0].message


def test_bad_category_is_rejected():
    with pytest.raises(ValueError):
        ValidationRule("x", "X", "x", "mandatory", lambda d: ValidationResult.valid())


def test_clear_rules():
    engine = register_with_engine(ConfigurableRuleEngine())
    engine.clear_rules()
    assert engine.rules == []
