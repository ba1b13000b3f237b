from pydantic import BaseModel, Field
from typing import Dict, List, Optional

from .values.bases import BaserunnerState
from .values.outcomes import AdvancementOutcome, OutcomeParameters
from .values.results import BattingResult
from .values.violations import RuleViolation


class OutcomesRequest(BaseModel):
    before: BaserunnerState = Field(default_factory=BaserunnerState.empty)
    batting_result: BattingResult
    batter_id: Optional[str] = None
    # None with all_presets=True -> union over every preset
    parameters: Optional[OutcomeParameters] = None
    all_presets: bool = True


class OutcomesResponse(BaseModel):
    base_configuration: str
    outcomes: List[AdvancementOutcome]


class AdvancementRequest(BaseModel):
    before: BaserunnerState = Field(default_factory=BaserunnerState.empty)
    batting_result: BattingResult
    batter_id: Optional[str] = None


class OverrideRequest(AdvancementRequest):
    overrides: Dict[str, str] = {}


class AdvancementResponse(BaseModel):
    final_baserunners: BaserunnerState
    scoring_runners: List[str]
    rbis: int
    outs: int


class AtBatRequest(BaseModel):
    before: BaserunnerState = Field(default_factory=BaserunnerState.empty)
    after: BaserunnerState = Field(default_factory=BaserunnerState.empty)
    # kept as a raw string so unknown codes come back as violations, not 422s
    batting_result: str
    batter_id: Optional[str] = None
    rbis: int = 0
    outs: int = 0
    runs_scored: List[str] = []
    # also require the transition to match a generated outcome
    match_outcomes: bool = False


class ValidationResponse(BaseModel):
    is_valid: bool
    violations: List[RuleViolation]
    suggested_outcomes: List[AdvancementOutcome] = []


class OutcomeCheckRequest(BaseModel):
    before: BaserunnerState = Field(default_factory=BaserunnerState.empty)
    batting_result: BattingResult
    batter_id: Optional[str] = None
    after: BaserunnerState
    rbis: int = Field(0, ge=0)
    outs: int = Field(0, ge=0, le=3)
    runs_scored: List[str] = []


class OutcomeCheckResponse(BaseModel):
    valid: bool
