from atbat_rules.models.rule_engine import ConfigurableRuleEngine
from atbat_rules.models.validation_rules import (
    BASE_ADVANCEMENT_VALIDATION,
    create_all_critical_rules,
    create_no_runner_passing_rule,
    register_with_engine,
)
from atbat_rules.values.bases import BaserunnerState
from atbat_rules.values.violations import AtBatValidationData, ViolationType


def _s(b1=None, b2=None, b3=None):
    return BaserunnerState.of(b1, b2, b3)


def _data(before, after, result, rbis=0, outs=0, runs=(), batter="X"):
    return AtBatValidationData(
        before_state=before,
        after_state=after,
        batting_result=result,
        batter_id=batter,
        rbis=rbis,
        outs=outs,
        runs_scored=tuple(runs),
    )


def _engine():
    return register_with_engine(ConfigurableRuleEngine())


def _types(res):
    return [v.type for v in res.violations]


def test_critical_rules_are_listed_in_order():
    ids = [r.id for r in create_all_critical_rules()]
    assert ids == [
        "no-runner-passing",
        "rbi-validation",
        "max-outs-validation",
        "base-advancement-validation",
        "hit-type-validation",
    ]
    assert all(r.category == "critical" for r in create_all_critical_rules())


def test_valid_single_passes():
    res = _engine().validate_at_bat(_data(_s("A", None, "C"), _s("X", "A", None), "1B", rbis=1, runs=["C"]))
    assert res.is_valid
    assert res.violations == ()


def test_runner_order_violation():
    rule = create_no_runner_passing_rule()
    res = rule.validate(_data(_s("A", "B", None), _s("X", None, "A"), "1B", runs=["B"]))
    assert res.is_valid
    res = rule.validate(_data(_s("A", "B", None), _s("X", "A", "B"), "1B"))
    assert res.is_valid
    res = rule.validate(_data(_s("A", "B", None), _s("X", "B", "A"), "1B"))
    assert ViolationType.RUNNER_ORDER_VIOLATION in _types(res)


def test_scoring_past_a_runner_still_on_base():
    rule = create_no_runner_passing_rule()
    res = rule.validate(_data(_s("A", None, "C"), _s("X", None, "C"), "1B", rbis=1, runs=["A"]))
    assert _types(res) == [ViolationType.RUNNER_PASSING_VIOLATION]


def test_batter_cannot_pass_runner():
    rule = create_no_runner_passing_rule()
    res = rule.validate(_data(_s("A"), _s("A", "X", None), "2B"))
    assert ViolationType.RUNNER_ORDER_VIOLATION in _types(res)


def test_more_rbis_than_runs():
    res = _engine().validate_at_bat(_data(_s(None, None, "C"), _s("X"), "1B", rbis=2, runs=["C"]))
    assert _types(res) == [ViolationType.INCORRECT_RBI_COUNT]


def test_fewer_rbis_than_runs_is_allowed():
    res = _engine().validate_at_bat(_data(_s(None, None, "C"), _s("X"), "1B", rbis=0, runs=["C"]))
    assert res.is_valid


def test_four_outs_is_excessive():
    res = _engine().validate_at_bat(_data(_s("A", "B", "C"), _s("A", "B", "C"), "SO", outs=4))
    assert ViolationType.EXCESSIVE_OUTS in _types(res)


def test_negative_outs_is_excessive():
    res = _engine().validate_at_bat(_data(_s(), _s("X"), "1B", outs=-1))
    assert ViolationType.EXCESSIVE_OUTS in _types(res)


def test_home_run_must_clear_bases():
    res = _engine().validate_at_bat(_data(_s(None, None, "C"), _s(None, None, "C"), "HR", rbis=1, runs=["X"]))
    assert ViolationType.INVALID_BASE_ADVANCEMENT in _types(res)


def test_runner_moving_backwards():
    res = _engine().validate_at_bat(_data(_s(None, None, "C"), _s("X", "C", None), "1B"))
    assert ViolationType.INVALID_BASE_ADVANCEMENT in _types(res)


def test_batter_short_of_guaranteed_base():
    res = _engine().validate_at_bat(_data(_s(), _s("X"), "2B"))
    msgs = [v.message for v in res.violations if v.rule_id == BASE_ADVANCEMENT_VALIDATION]
    assert any("at least 2nd" in m for m in msgs)


def test_runner_removed_without_an_out():
    res = _engine().validate_at_bat(_data(_s("A"), _s("X"), "1B"))
    assert ViolationType.INVALID_BASE_ADVANCEMENT in _types(res)
    res = _engine().validate_at_bat(_data(_s("A"), _s("X"), "FC", outs=1))
    assert res.is_valid


def test_stranger_on_base():
    res = _engine().validate_at_bat(_data(_s(), _s("X", "Q", None), "1B"))
    assert ViolationType.INVALID_BASE_ADVANCEMENT in _types(res)


def test_unknown_result_code():
    res = _engine().validate_at_bat(_data(_s(), _s("X"), "ZZ"))
    assert _types(res) == [ViolationType.INVALID_HIT_TYPE]


def test_strikeout_without_an_out():
    res = _engine().validate_at_bat(_data(_s("A"), _s("A"), "SO", outs=0))
    assert ViolationType.INVALID_HIT_TYPE in _types(res)


def test_violations_are_aggregated_not_short_circuited():
    data = _data(_s("A", None, "C"), _s("X", None, "C"), "1B", rbis=3, outs=4, runs=["A"])
    res = _engine().validate_at_bat(data)
    types = set(_types(res))
    assert {
        ViolationType.RUNNER_PASSING_VIOLATION,
        ViolationType.INCORRECT_RBI_COUNT,
        ViolationType.EXCESSIVE_OUTS,
    } <= types
    assert not res.is_valid


def test_validation_is_idempotent():
    data = _data(_s("A", "B", "C"), _s(None, None, "A"), "HR", rbis=5, outs=4, runs=["B", "C"])
    engine = _engine()
    assert engine.validate_at_bat(data) == engine.validate_at_bat(data)


def test_runner_listed_twice_in_runs_scored():
    res = _engine().validate_at_bat(_data(_s(None, None, "C"), _s("X"), "1B", rbis=2, runs=["C", "C"]))
    msgs = [v.message for v in res.violations if v.type == ViolationType.INVALID_BASE_ADVANCEMENT]
    assert any("scored more than once" in m for m in msgs)


def test_batter_already_on_base_before_the_at_bat():
    res = _engine().validate_at_bat(_data(_s("X"), _s(None, "X", None), "1B"))
    msgs = [v.message for v in res.violations if v.type == ViolationType.INVALID_BASE_ADVANCEMENT]
    assert any("already be on base" in m for m in msgs)


def test_runner_on_two_bases_before_the_at_bat():
    res = _engine().validate_at_bat(_data(_s("A", "A", None), _s("X", None, "A"), "1B"))
    msgs = [v.message for v in res.violations if v.type == ViolationType.INVALID_BASE_ADVANCEMENT]
    assert any("started on more than one base" in m for m in msgs)
