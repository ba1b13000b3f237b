import pytest

from atbat_rules.models.advancement_model import (
    AdvancementError,
    AdvancementService,
    InvalidOverrideError,
    RunnerPassingError,
    UnknownRunnerError,
)
from atbat_rules.values.bases import BaserunnerState
from atbat_rules.values.results import BattingResult


def _s(b1=None, b2=None, b3=None):
    return BaserunnerState.of(b1, b2, b3)


def test_standard_single_moves_everyone_one_base():
    adv = AdvancementService()
    res = adv.calculate_standard_advancement(_s("A", None, "C"), BattingResult.SINGLE, "X")
    assert res.final_baserunners == _s("X", "A", None)
    assert res.scoring_runners == ("C",)
    assert res.rbis == 1
    assert res.outs == 0


def test_standard_home_run_with_bases_loaded():
    adv = AdvancementService()
    res = adv.calculate_standard_advancement(_s("A", "B", "C"), BattingResult.HOME_RUN, "X")
    assert res.final_baserunners == BaserunnerState.empty()
    assert res.scoring_runners == ("A", "B", "C", "X")
    assert res.rbis == 4


def test_error_scores_runs_without_rbi():
    adv = AdvancementService()
    res = adv.calculate_standard_advancement(_s(None, None, "C"), BattingResult.ERROR, "X")
    assert res.scoring_runners == ("C",)
    assert res.rbis == 0


def test_override_holds_runner_at_second():
    adv = AdvancementService()
    res = adv.apply_manual_overrides(_s(None, "B", None), BattingResult.SINGLE, "X", {"B": "stay"})
    assert res.final_baserunners == _s("X", "B", None)
    assert res.scoring_runners == ()
    assert res.rbis == 0


def test_overrides_send_runners_home():
    adv = AdvancementService()
    res = adv.apply_manual_overrides(_s("A", "B", None), BattingResult.SINGLE, "X", {"A": "third", "B": "home"})
    assert res.final_baserunners == _s("X", None, "A")
    assert res.scoring_runners == ("B",)
    assert res.rbis == 1


def test_runner_without_override_keeps_standard_fate():
    adv = AdvancementService()
    res = adv.apply_manual_overrides(_s("A", None, "C"), BattingResult.SINGLE, "X", {"A": "third"})
    # C still scores from third as in the standard single
    assert res.final_baserunners == _s("X", None, "A")
    assert res.scoring_runners == ("C",)
    assert res.rbis == 1


def test_override_out_adds_an_out():
    adv = AdvancementService()
    res = adv.apply_manual_overrides(_s("A", "B", "C"), BattingResult.SINGLE, "X", {"A": "out"})
    assert res.final_baserunners == _s("X", None, "B")
    assert res.outs == 1
    assert res.scoring_runners == ("C",)


def test_saving_the_standard_out_on_a_fielders_choice():
    adv = AdvancementService()
    res = adv.apply_manual_overrides(_s("A", None, None), BattingResult.FIELDERS_CHOICE, "X", {"A": "second"})
    assert res.final_baserunners == _s("X", "A", None)
    assert res.outs == 0


def test_batter_placement_ignores_overrides():
    adv = AdvancementService()
    res = adv.apply_manual_overrides(_s("A", None, None), BattingResult.DOUBLE, "X", {"A": "third"})
    assert res.final_baserunners == _s(None, "X", "A")
    assert res.rbis == 0


def test_error_overrides_never_credit_rbi():
    adv = AdvancementService()
    res = adv.apply_manual_overrides(_s("A", "B", None), BattingResult.ERROR, "X", {"A": "home", "B": "home"})
    assert res.scoring_runners == ("A", "B")
    assert res.rbis == 0


def test_trailing_runner_cannot_pass_lead_runner():
    adv = AdvancementService()
    with pytest.raises(RunnerPassingError, match="cannot pass another runner"):
        adv.apply_manual_overrides(_s("A", None, "C"), BattingResult.SINGLE, "X", {"A": "home", "C": "stay"})


def test_runner_cannot_stay_where_batter_lands():
    adv = AdvancementService()
    with pytest.raises(RunnerPassingError):
        adv.apply_manual_overrides(_s("A", None, None), BattingResult.SINGLE, "X", {"A": "stay"})


def test_passing_is_allowed_when_lead_runner_is_out():
    adv = AdvancementService()
    res = adv.apply_manual_overrides(_s("A", "B", None), BattingResult.SINGLE, "X", {"A": "third", "B": "out"})
    assert res.final_baserunners == _s("X", None, "A")
    assert res.outs == 1


def test_unknown_runner_is_rejected():
    adv = AdvancementService()
    with pytest.raises(UnknownRunnerError):
        adv.apply_manual_overrides(_s("A"), BattingResult.SINGLE, "X", {"Z": "home"})


def test_bad_destinations_are_rejected():
    adv = AdvancementService()
    with pytest.raises(InvalidOverrideError):
        adv.apply_manual_overrides(_s("A"), BattingResult.SINGLE, "X", {"A": "dugout"})
    with pytest.raises(InvalidOverrideError):
        adv.apply_manual_overrides(_s(None, None, "C"), BattingResult.SINGLE, "X", {"C": "second"})


def test_override_errors_share_a_base_class():
    assert issubclass(RunnerPassingError, AdvancementError)
    assert issubclass(AdvancementError, ValueError)
