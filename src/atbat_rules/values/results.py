from __future__ import annotations

from enum import Enum
from typing import Dict, Optional

from .bases import Base, BaserunnerState


class BattingResult(str, Enum):
    """Closed set of at-bat outcome codes.

    Every classification below is a table keyed by each member, so adding a
    code without extending the tables fails loudly (KeyError) instead of
    falling through to a default.
    """

    SINGLE = "1B"
    DOUBLE = "2B"
    TRIPLE = "3B"
    HOME_RUN = "HR"
    WALK = "BB"
    INTENTIONAL_WALK = "IBB"
    STRIKEOUT = "SO"
    GROUND_OUT = "GO"
    AIR_OUT = "AO"
    SACRIFICE_FLY = "SF"
    ERROR = "E"
    FIELDERS_CHOICE = "FC"
    DOUBLE_PLAY = "DP"

    @classmethod
    def parse(cls, code: object) -> Optional["BattingResult"]:
        """Return the member for `code`, or None when it is not a known code."""
        if isinstance(code, cls):
            return code
        try:
            return cls(code)
        except ValueError:
            return None

    @property
    def is_hit(self) -> bool:
        return _IS_HIT[self]

    @property
    def is_out(self) -> bool:
        return _IS_OUT[self]

    @property
    def is_walk(self) -> bool:
        return self in (BattingResult.WALK, BattingResult.INTENTIONAL_WALK)

    @property
    def batter_base(self) -> Optional[Base]:
        """Minimum base the batter is guaranteed; None when the batter is retired."""
        return _BATTER_BASE[self]

    @property
    def reaches_base(self) -> bool:
        return self.batter_base is not None

    @property
    def retires_batter(self) -> bool:
        return self.batter_base is None

    @property
    def requires_force_advancement(self) -> bool:
        # Batter takes first, so runners on first (and behind-to-ahead chains) are forced.
        return self.batter_base == Base.FIRST

    @property
    def credits_rbi(self) -> bool:
        return _CREDITS_RBI[self]

    def outs_for(self, before: BaserunnerState) -> int:
        if self is BattingResult.FIELDERS_CHOICE:
            return 0 if before.is_empty() else 1
        return _IMPLIED_OUTS[self]

    def __str__(self) -> str:
        return self.value


_R = BattingResult

_IS_HIT: Dict[BattingResult, bool] = {
    _R.SINGLE: True, _R.DOUBLE: True, _R.TRIPLE: True, _R.HOME_RUN: True,
    _R.WALK: False, _R.INTENTIONAL_WALK: False,
    _R.STRIKEOUT: False, _R.GROUND_OUT: False, _R.AIR_OUT: False,
    _R.SACRIFICE_FLY: False, _R.ERROR: False, _R.FIELDERS_CHOICE: False, _R.DOUBLE_PLAY: False,
}

_IS_OUT: Dict[BattingResult, bool] = {
    _R.SINGLE: False, _R.DOUBLE: False, _R.TRIPLE: False, _R.HOME_RUN: False,
    _R.WALK: False, _R.INTENTIONAL_WALK: False,
    _R.STRIKEOUT: True, _R.GROUND_OUT: True, _R.AIR_OUT: True,
    _R.SACRIFICE_FLY: False, _R.ERROR: False, _R.FIELDERS_CHOICE: False, _R.DOUBLE_PLAY: True,
}

_BATTER_BASE: Dict[BattingResult, Optional[Base]] = {
    _R.SINGLE: Base.FIRST, _R.DOUBLE: Base.SECOND, _R.TRIPLE: Base.THIRD, _R.HOME_RUN: Base.HOME,
    _R.WALK: Base.FIRST, _R.INTENTIONAL_WALK: Base.FIRST,
    _R.STRIKEOUT: None, _R.GROUND_OUT: None, _R.AIR_OUT: None,
    _R.SACRIFICE_FLY: None, _R.ERROR: Base.FIRST, _R.FIELDERS_CHOICE: Base.FIRST, _R.DOUBLE_PLAY: None,
}

# FC is situational; see BattingResult.outs_for
_IMPLIED_OUTS: Dict[BattingResult, int] = {
    _R.SINGLE: 0, _R.DOUBLE: 0, _R.TRIPLE: 0, _R.HOME_RUN: 0,
    _R.WALK: 0, _R.INTENTIONAL_WALK: 0,
    _R.STRIKEOUT: 1, _R.GROUND_OUT: 1, _R.AIR_OUT: 1,
    _R.SACRIFICE_FLY: 1, _R.ERROR: 0, _R.FIELDERS_CHOICE: 1, _R.DOUBLE_PLAY: 2,
}

_CREDITS_RBI: Dict[BattingResult, bool] = {
    _R.SINGLE: True, _R.DOUBLE: True, _R.TRIPLE: True, _R.HOME_RUN: True,
    _R.WALK: True, _R.INTENTIONAL_WALK: True,
    _R.STRIKEOUT: True, _R.GROUND_OUT: True, _R.AIR_OUT: True,
    _R.SACRIFICE_FLY: True, _R.ERROR: False, _R.FIELDERS_CHOICE: True, _R.DOUBLE_PLAY: False,
}

CLASSIFICATION_TABLES = (_IS_HIT, _IS_OUT, _BATTER_BASE, _IMPLIED_OUTS, _CREDITS_RBI)
