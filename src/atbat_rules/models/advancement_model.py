from __future__ import annotations

import logging
from typing import Dict, Mapping, Optional

from ..values.bases import Base, BaserunnerState
from ..values.outcomes import AdvancementResult
from ..values.results import BattingResult
from .outcome_generator import Fates, OutcomeGenerator, fates_to_state, standard_fates

logger = logging.getLogger(__name__)

OVERRIDE_CHOICES = ("stay", "second", "third", "home", "out")

_OVERRIDE_BASES = {"second": Base.SECOND, "third": Base.THIRD, "home": Base.HOME}


class AdvancementError(ValueError):
    """An override the scorekeeper must correct before the at-bat can be recorded."""


class UnknownRunnerError(AdvancementError):
    pass


class InvalidOverrideError(AdvancementError):
    pass


class RunnerPassingError(AdvancementError):
    pass


def _rank(dest: Optional[Base]) -> int:
    return int(dest) if dest is not None else -1


class AdvancementService:
    """Compute the outcome actually recorded for an at-bat.

    The standard outcome comes straight from the outcome generator. Manual
    overrides replace the fate of individual runners; runners without an
    override keep their standard fate and the batter is always placed on the
    result's guaranteed base. Bad overrides raise an AdvancementError.
    """

    def __init__(self, generator: Optional[OutcomeGenerator] = None):
        self.generator = generator or OutcomeGenerator()

    def calculate_standard_advancement(
        self, before: BaserunnerState, result: BattingResult, batter_id: str
    ) -> AdvancementResult:
        outcome = self.generator.standard_outcome(before, result, batter_id)
        return AdvancementResult.from_outcome(outcome)

    def apply_manual_overrides(
        self,
        before: BaserunnerState,
        result: BattingResult,
        batter_id: str,
        overrides: Mapping[str, str],
    ) -> AdvancementResult:
        standard = standard_fates(before, result, batter_id)
        fates: Fates = dict(standard)
        starts = before.positions()

        for runner_id, choice in overrides.items():
            start = starts.get(runner_id)
            if start is None:
                raise UnknownRunnerError(f"Runner {runner_id} is not on base")
            fates[runner_id] = self._resolve(runner_id, start, choice)

        # Batter placement ignores overrides.
        fates[batter_id] = result.batter_base
        self._check_order(before, batter_id, fates)

        after, scored = fates_to_state(fates)
        rbis = len(scored) if result.credits_rbi else 0
        outs = result.outs_for(before)
        for runner_id in starts:
            was_out = standard.get(runner_id) is None
            is_out = fates[runner_id] is None
            outs += int(is_out and not was_out) - int(was_out and not is_out)

        logger.debug("overrides %s on %s [%s] -> %s, runs=%s", dict(overrides), result.value, before, after, list(scored))
        return AdvancementResult(final_baserunners=after, scoring_runners=scored, rbis=rbis, outs=max(0, outs))

    @staticmethod
    def _resolve(runner_id: str, start: Base, choice: str) -> Optional[Base]:
        key = str(choice).strip().lower()
        if key == "stay":
            return start
        if key == "out":
            return None
        dest = _OVERRIDE_BASES.get(key)
        if dest is None:
            raise InvalidOverrideError(
                f"Unknown override '{choice}' for runner {runner_id}; expected one of {', '.join(OVERRIDE_CHOICES)}"
            )
        if dest < start:
            raise InvalidOverrideError(f"Runner {runner_id} cannot move back from {start.label} to {dest.label}")
        return dest

    @staticmethod
    def _check_order(before: BaserunnerState, batter_id: str, fates: Fates) -> None:
        # Trail to lead: batter, then first, second, third.
        order = [batter_id] + before.runners()
        for i, trailer in enumerate(order):
            t_dest = fates.get(trailer)
            if t_dest is None:
                continue
            for leader in order[i + 1:]:
                l_dest = fates.get(leader)
                if l_dest is None or l_dest == Base.HOME:
                    continue
                if _rank(t_dest) >= _rank(l_dest):
                    raise RunnerPassingError(
                        f"Runner cannot pass another runner: {trailer} cannot finish at or beyond "
                        f"{leader} on {l_dest.label}"
                    )
