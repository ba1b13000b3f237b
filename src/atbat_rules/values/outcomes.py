from __future__ import annotations

from enum import Enum
from typing import List, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .bases import BaserunnerState


class OutcomeParameters(str, Enum):
    """Presets controlling how far non-forced runners may go in generated outcomes."""

    STANDARD = "standard"
    AGGRESSIVE = "aggressive"
    FIELDING_ERROR = "fieldingError"

    @classmethod
    def all_presets(cls) -> List["OutcomeParameters"]:
        return list(cls)

    def describe(self) -> str:
        return _DESCRIPTIONS[self]


_DESCRIPTIONS = {
    OutcomeParameters.STANDARD: "Standard",
    OutcomeParameters.AGGRESSIVE: "Aggressive Running",
    OutcomeParameters.FIELDING_ERROR: "Fielding Error",
}

_TAGS = {
    OutcomeParameters.STANDARD: "",
    OutcomeParameters.AGGRESSIVE: "Aggressive",
    OutcomeParameters.FIELDING_ERROR: "Error",
}


class AdvancementOutcome(BaseModel):
    """One legal after-state for an at-bat, as produced by the outcome generator."""

    after_state: BaserunnerState
    rbis: int = Field(0, ge=0)
    runs_scored: Tuple[str, ...] = ()
    outs: int = Field(0, ge=0, le=3)
    description: str
    required_parameters: OutcomeParameters = OutcomeParameters.STANDARD

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def _rbis_within_runs(self) -> "AdvancementOutcome":
        if self.rbis > len(self.runs_scored):
            raise ValueError(f"RBI count ({self.rbis}) cannot exceed runs scored ({len(self.runs_scored)})")
        return self

    @property
    def is_standard(self) -> bool:
        return self.required_parameters is OutcomeParameters.STANDARD

    def is_valid_with_parameters(self, parameters: OutcomeParameters) -> bool:
        return self.is_standard or self.required_parameters is parameters

    def matches(self, other: "AdvancementOutcome") -> bool:
        """Same transition, regardless of how it was labelled."""
        return (
            self.after_state == other.after_state
            and self.rbis == other.rbis
            and self.outs == other.outs
            and tuple(self.runs_scored) == tuple(other.runs_scored)
        )

    def __str__(self) -> str:
        rbi_text = "1 RBI" if self.rbis == 1 else f"{self.rbis} RBIs"
        out_text = "" if self.outs == 0 else f", {self.outs} out{'s' if self.outs > 1 else ''}"
        tag = _TAGS[self.required_parameters]
        tag_text = f" [{tag}]" if tag else ""
        return f"{self.description} ({rbi_text}{out_text}){tag_text}"


class AdvancementResult(BaseModel):
    """What the advancement service hands to the caller for recording."""

    final_baserunners: BaserunnerState
    scoring_runners: Tuple[str, ...] = ()
    rbis: int = 0
    outs: int = 0

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_outcome(cls, outcome: AdvancementOutcome) -> "AdvancementResult":
        return cls(
            final_baserunners=outcome.after_state,
            scoring_runners=outcome.runs_scored,
            rbis=outcome.rbis,
            outs=outcome.outs,
        )
