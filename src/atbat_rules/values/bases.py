from __future__ import annotations

from enum import IntEnum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class Base(IntEnum):
    FIRST = 1
    SECOND = 2
    THIRD = 3
    HOME = 4

    @property
    def label(self) -> str:
        return _LABELS[self]


_LABELS = {Base.FIRST: "1st", Base.SECOND: "2nd", Base.THIRD: "3rd", Base.HOME: "home"}

_SLOTS = {Base.FIRST: "first", Base.SECOND: "second", Base.THIRD: "third"}

_CONFIG_KEYS = {
    (False, False, False): "empty",
    (True, False, False): "first_only",
    (False, True, False): "second_only",
    (False, False, True): "third_only",
    (True, True, False): "first_second",
    (True, False, True): "first_third",
    (False, True, True): "second_third",
    (True, True, True): "loaded",
}


class BaserunnerState(BaseModel):
    """Who occupies first, second and third base.

    Frozen, so two states with the same occupants compare (and hash) equal.
    JSON IO uses the "1B"/"2B"/"3B" keys; Python code uses the field names.
    Cross-slot invariants (one runner per slot, no batter in a before-state)
    are not enforced here; the validation rules report them.
    """

    first: Optional[str] = Field(None, alias="1B")
    second: Optional[str] = Field(None, alias="2B")
    third: Optional[str] = Field(None, alias="3B")

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    @classmethod
    def empty(cls) -> "BaserunnerState":
        return cls()

    @classmethod
    def of(cls, first: Optional[str] = None, second: Optional[str] = None, third: Optional[str] = None) -> "BaserunnerState":
        return cls(first=first, second=second, third=third)

    @classmethod
    def from_positions(cls, positions: Dict[Base, str]) -> "BaserunnerState":
        """Build a state from base -> runner; HOME entries are ignored."""
        slots = {_SLOTS[b]: rid for b, rid in positions.items() if b in _SLOTS}
        return cls(**slots)

    def runner_on(self, base: Base) -> Optional[str]:
        if base not in _SLOTS:
            return None
        return getattr(self, _SLOTS[base])

    def occupied(self) -> List[Base]:
        return [b for b in (Base.FIRST, Base.SECOND, Base.THIRD) if self.runner_on(b) is not None]

    def runners(self) -> List[str]:
        """Runner ids in base order, first to third."""
        return [self.runner_on(b) for b in self.occupied()]

    @property
    def runner_count(self) -> int:
        return len(self.occupied())

    def is_empty(self) -> bool:
        return self.runner_count == 0

    def is_loaded(self) -> bool:
        return self.runner_count == 3

    def has_runner(self, runner_id: str) -> bool:
        return runner_id in self.runners()

    def base_of(self, runner_id: str) -> Optional[Base]:
        for b in self.occupied():
            if self.runner_on(b) == runner_id:
                return b
        return None

    def positions(self) -> Dict[str, Base]:
        # With a duplicated id the lead base wins; callers that care check first.
        return {self.runner_on(b): b for b in self.occupied()}

    def with_runner(self, base: Base, runner_id: Optional[str]) -> "BaserunnerState":
        return self.model_copy(update={_SLOTS[base]: runner_id})

    def config_key(self) -> str:
        return _CONFIG_KEYS[(self.first is not None, self.second is not None, self.third is not None)]

    def as_dict(self) -> Dict[str, Optional[str]]:
        return self.model_dump(by_alias=True)

    def __str__(self) -> str:
        parts = [f"{b.value}B: {self.runner_on(b)}" for b in self.occupied()]
        return ", ".join(parts) if parts else "Bases empty"
