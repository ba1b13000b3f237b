from __future__ import annotations

import logging
from itertools import combinations
from typing import Callable, Dict, FrozenSet, List, Optional, Sequence, Tuple

from ..values.bases import Base, BaserunnerState
from ..values.outcomes import AdvancementOutcome, OutcomeParameters
from ..values.results import BattingResult

logger = logging.getLogger(__name__)

# runner id -> destination base, or None when the runner is put out.
# Insertion order is first, second, third, batter; scoring order follows it.
Fates = Dict[str, Optional[Base]]


def _start_bases(before: BaserunnerState, batter_id: str) -> Dict[str, int]:
    starts: Dict[str, int] = {rid: int(b) for rid, b in before.positions().items()}
    starts[batter_id] = 0
    return starts


def _advance(base: Base, n: int) -> Base:
    return Base(min(int(base) + n, int(Base.HOME)))


def _forced_chain(before: BaserunnerState) -> List[Base]:
    """Bases whose runners are forced when the batter takes first."""
    chain: List[Base] = []
    for b in (Base.FIRST, Base.SECOND, Base.THIRD):
        if before.runner_on(b) is None:
            break
        chain.append(b)
    return chain


def _runners_plus(before: BaserunnerState, n: int) -> Fates:
    return {before.runner_on(b): _advance(b, n) for b in before.occupied()}


def _runners_hold(before: BaserunnerState) -> Fates:
    return {before.runner_on(b): b for b in before.occupied()}


def _single(before: BaserunnerState, batter_id: str) -> Fates:
    fates = _runners_plus(before, 1)
    fates[batter_id] = Base.FIRST
    return fates


def _double(before: BaserunnerState, batter_id: str) -> Fates:
    # House convention: a double scores every runner, including one from first.
    fates: Fates = {before.runner_on(b): Base.HOME for b in before.occupied()}
    fates[batter_id] = Base.SECOND
    return fates


def _triple(before: BaserunnerState, batter_id: str) -> Fates:
    fates: Fates = {before.runner_on(b): Base.HOME for b in before.occupied()}
    fates[batter_id] = Base.THIRD
    return fates


def _home_run(before: BaserunnerState, batter_id: str) -> Fates:
    fates: Fates = {before.runner_on(b): Base.HOME for b in before.occupied()}
    fates[batter_id] = Base.HOME
    return fates


def _walk(before: BaserunnerState, batter_id: str) -> Fates:
    forced = _forced_chain(before)
    fates: Fates = {before.runner_on(b): (_advance(b, 1) if b in forced else b) for b in before.occupied()}
    fates[batter_id] = Base.FIRST
    return fates


def _batter_out(before: BaserunnerState, batter_id: str) -> Fates:
    fates = _runners_hold(before)
    fates[batter_id] = None
    return fates


def _double_play(before: BaserunnerState, batter_id: str) -> Fates:
    fates = _runners_hold(before)
    if before.first is not None:
        fates[before.first] = None
    fates[batter_id] = None
    return fates


def _sacrifice_fly(before: BaserunnerState, batter_id: str) -> Fates:
    fates = _runners_hold(before)
    if before.third is not None:
        fates[before.third] = Base.HOME
    fates[batter_id] = None
    return fates


def _fielders_choice(before: BaserunnerState, batter_id: str) -> Fates:
    fates = _runners_hold(before)
    forced = _forced_chain(before)
    if forced:
        lead = forced[-1]
        for b in forced[:-1]:
            fates[before.runner_on(b)] = _advance(b, 1)
        fates[before.runner_on(lead)] = None
    elif not before.is_empty():
        # Nobody forced: the play is made on the lead runner.
        fates[before.runner_on(before.occupied()[-1])] = None
    fates[batter_id] = Base.FIRST
    return fates


_STANDARD_FATES: Dict[BattingResult, Callable[[BaserunnerState, str], Fates]] = {
    BattingResult.SINGLE: _single,
    BattingResult.DOUBLE: _double,
    BattingResult.TRIPLE: _triple,
    BattingResult.HOME_RUN: _home_run,
    BattingResult.WALK: _walk,
    BattingResult.INTENTIONAL_WALK: _walk,
    BattingResult.STRIKEOUT: _batter_out,
    BattingResult.GROUND_OUT: _batter_out,
    BattingResult.AIR_OUT: _batter_out,
    BattingResult.SACRIFICE_FLY: _sacrifice_fly,
    BattingResult.ERROR: _single,
    BattingResult.FIELDERS_CHOICE: _fielders_choice,
    BattingResult.DOUBLE_PLAY: _double_play,
}

_RUNNERS = frozenset({"runners"})
_BATTER = frozenset({"batter"})
_EVERYONE = frozenset({"runners", "batter"})
_NOBODY: FrozenSet[str] = frozenset()

# Who may take an extra base under each non-standard preset.
_EXTRA_BASE_SCOPE: Dict[OutcomeParameters, Dict[BattingResult, FrozenSet[str]]] = {
    OutcomeParameters.AGGRESSIVE: {
        BattingResult.SINGLE: _RUNNERS,
        BattingResult.DOUBLE: _NOBODY,
        BattingResult.TRIPLE: _BATTER,
        BattingResult.HOME_RUN: _NOBODY,
        BattingResult.WALK: _NOBODY,
        BattingResult.INTENTIONAL_WALK: _NOBODY,
        BattingResult.STRIKEOUT: _NOBODY,
        BattingResult.GROUND_OUT: _NOBODY,
        BattingResult.AIR_OUT: _NOBODY,
        BattingResult.SACRIFICE_FLY: _RUNNERS,
        BattingResult.ERROR: _RUNNERS,
        BattingResult.FIELDERS_CHOICE: _NOBODY,
        BattingResult.DOUBLE_PLAY: _NOBODY,
    },
    OutcomeParameters.FIELDING_ERROR: {
        BattingResult.SINGLE: _EVERYONE,
        BattingResult.DOUBLE: _EVERYONE,
        BattingResult.TRIPLE: _EVERYONE,
        BattingResult.HOME_RUN: _NOBODY,
        BattingResult.WALK: _NOBODY,
        BattingResult.INTENTIONAL_WALK: _NOBODY,
        BattingResult.STRIKEOUT: _NOBODY,
        BattingResult.GROUND_OUT: _NOBODY,
        BattingResult.AIR_OUT: _NOBODY,
        BattingResult.SACRIFICE_FLY: _NOBODY,
        BattingResult.ERROR: _EVERYONE,
        BattingResult.FIELDERS_CHOICE: _NOBODY,
        BattingResult.DOUBLE_PLAY: _NOBODY,
    },
}


def standard_fates(before: BaserunnerState, result: BattingResult, batter_id: str) -> Fates:
    """Per-runner destinations of the standard outcome (batter last)."""
    return _STANDARD_FATES[result](before, batter_id)


def fates_to_state(fates: Fates) -> Tuple[BaserunnerState, Tuple[str, ...]]:
    on_base = {dest: rid for rid, dest in fates.items() if dest is not None and dest != Base.HOME}
    scored = tuple(rid for rid, dest in fates.items() if dest == Base.HOME)
    return BaserunnerState.from_positions(on_base), scored


def _has_collision(fates: Fates) -> bool:
    occupied = [d for d in fates.values() if d is not None and d != Base.HOME]
    return len(occupied) != len(set(occupied))


def _describe_move(runner_id: str, start: int, dest: Base, batter_id: str) -> str:
    who = "Batter" if runner_id == batter_id else f"Runner from {Base(start).label}"
    where = "scores" if dest == Base.HOME else f"reaches {dest.label}"
    return f"{who} {where}"


class OutcomeGenerator:
    """Enumerate the legal after-states for an at-bat.

    - The standard outcome comes from a fixed per-result rule table.
    - AGGRESSIVE adds variants where non-forced runners take an extra base
      (earned, so RBIs follow the runs).
    - FIELDING_ERROR adds variants where anyone still on base takes an extra,
      unearned base (RBIs stay at the standard count).
    Variants are built over every subset of the eligible runners; subsets that
    would stack two runners on one base are dropped.
    """

    def standard_outcome(self, before: BaserunnerState, result: BattingResult, batter_id: str) -> AdvancementOutcome:
        fates = standard_fates(before, result, batter_id)
        after, scored = fates_to_state(fates)
        rbis = len(scored) if result.credits_rbi else 0
        return AdvancementOutcome(
            after_state=after,
            rbis=rbis,
            runs_scored=scored,
            outs=result.outs_for(before),
            description=f"Standard {result.value}",
        )

    def generate_valid_outcomes(
        self,
        before: BaserunnerState,
        result: BattingResult,
        batter_id: str,
        parameters: OutcomeParameters = OutcomeParameters.STANDARD,
    ) -> List[AdvancementOutcome]:
        standard = self.standard_outcome(before, result, batter_id)
        outcomes = [standard]
        if parameters is not OutcomeParameters.STANDARD:
            outcomes.extend(self._extra_base_variants(before, result, batter_id, parameters, standard))
        logger.debug("generated %d outcome(s) for %s [%s] under %s", len(outcomes), result.value, before, parameters.value)
        return outcomes

    def get_all_valid_outcomes(self, before: BaserunnerState, result: BattingResult, batter_id: str) -> List[AdvancementOutcome]:
        seen = set()
        unique: List[AdvancementOutcome] = []
        for preset in OutcomeParameters.all_presets():
            for outcome in self.generate_valid_outcomes(before, result, batter_id, preset):
                if outcome.description in seen:
                    continue
                seen.add(outcome.description)
                unique.append(outcome)
        return unique

    def validate_outcome(
        self,
        before: BaserunnerState,
        result: BattingResult,
        batter_id: str,
        candidate: AdvancementOutcome,
    ) -> bool:
        return any(o.matches(candidate) for o in self.get_all_valid_outcomes(before, result, batter_id))

    def _extra_base_variants(
        self,
        before: BaserunnerState,
        result: BattingResult,
        batter_id: str,
        parameters: OutcomeParameters,
        standard: AdvancementOutcome,
    ) -> List[AdvancementOutcome]:
        scope = _EXTRA_BASE_SCOPE[parameters][result]
        if not scope:
            return []
        base_fates = standard_fates(before, result, batter_id)
        starts = _start_bases(before, batter_id)
        eligible: Sequence[str] = [
            rid
            for rid, dest in base_fates.items()
            if dest is not None
            and dest != Base.HOME
            and (("batter" in scope) if rid == batter_id else ("runners" in scope))
        ]

        seen = {(standard.after_state, standard.runs_scored)}
        variants: List[AdvancementOutcome] = []
        for size in range(1, len(eligible) + 1):
            for movers in combinations(eligible, size):
                fates = dict(base_fates)
                for rid in movers:
                    fates[rid] = _advance(fates[rid], 1)
                if _has_collision(fates):
                    continue
                after, scored = fates_to_state(fates)
                if (after, scored) in seen:
                    continue
                seen.add((after, scored))

                if parameters is OutcomeParameters.FIELDING_ERROR:
                    rbis = standard.rbis
                    label = f"{result.value} + Error"
                else:
                    rbis = len(scored) if result.credits_rbi else 0
                    label = f"Aggressive {result.value}"
                moves = ", ".join(_describe_move(rid, starts[rid], fates[rid], batter_id) for rid in movers)
                variants.append(
                    AdvancementOutcome(
                        after_state=after,
                        rbis=rbis,
                        runs_scored=scored,
                        outs=standard.outs,
                        description=f"{label} - {moves}",
                        required_parameters=parameters,
                    )
                )
        return variants
