from fastapi import FastAPI, HTTPException
import logging
from pathlib import Path

from ..schemas import (
    OutcomesRequest,
    OutcomesResponse,
    AdvancementRequest,
    OverrideRequest,
    AdvancementResponse,
    AtBatRequest,
    ValidationResponse,
    OutcomeCheckRequest,
    OutcomeCheckResponse,
)
from ..config import Settings, load_settings
from ..models.outcome_generator import OutcomeGenerator
from ..models.advancement_model import AdvancementService, AdvancementError
from ..models.rule_engine import ConfigurableRuleEngine
from ..models.rule_matrix import RuleMatrixService
from ..models.validation_rules import register_with_engine
from ..telemetry.logger import maybe_log_validation
from ..values.outcomes import AdvancementOutcome, AdvancementResult
from ..values.violations import AtBatValidationData, ValidationResult

logger = logging.getLogger(__name__)

# Settings file is optional; defaults apply when it is missing or unreadable.
_ROOT = Path(__file__).resolve().parents[3]
try:
    _settings = load_settings(str(_ROOT / "config" / "settings.example.yaml"))
except Exception:
    logger.warning("could not load settings, using defaults", exc_info=True)
    _settings = Settings()

logging.getLogger("atbat_rules").setLevel(_settings.log_level.upper())

app = FastAPI()
_generator = OutcomeGenerator()
_advancer = AdvancementService(_generator)
_engine = register_with_engine(
    ConfigurableRuleEngine(rule_states=_settings.rule_states, default_enabled=_settings.default_rule_enabled)
)
_matrix = RuleMatrixService(rule_engine=_engine, generator=_generator)


def _batter(batter_id):
    return batter_id or _settings.batter_id


def _advancement_response(res: AdvancementResult) -> AdvancementResponse:
    return AdvancementResponse(
        final_baserunners=res.final_baserunners,
        scoring_runners=list(res.scoring_runners),
        rbis=res.rbis,
        outs=res.outs,
    )


def _validation_response(res: ValidationResult) -> ValidationResponse:
    return ValidationResponse(
        is_valid=res.is_valid,
        violations=list(res.violations),
        suggested_outcomes=list(res.suggested_outcomes),
    )


@app.get("/health")
def health():
    return {"status": "ok"}


@app.post("/v1/outcomes", response_model=OutcomesResponse)
def outcomes(req: OutcomesRequest):
    batter = _batter(req.batter_id)
    if req.parameters is not None:
        found = _generator.generate_valid_outcomes(req.before, req.batting_result, batter, req.parameters)
    elif req.all_presets:
        found = _generator.get_all_valid_outcomes(req.before, req.batting_result, batter)
    else:
        found = _generator.generate_valid_outcomes(req.before, req.batting_result, batter, _settings.default_parameters)
    return OutcomesResponse(base_configuration=req.before.config_key(), outcomes=found)


@app.post("/v1/advancement/standard", response_model=AdvancementResponse)
def standard_advancement(req: AdvancementRequest):
    res = _advancer.calculate_standard_advancement(req.before, req.batting_result, _batter(req.batter_id))
    return _advancement_response(res)


@app.post("/v1/advancement/override", response_model=AdvancementResponse)
def override_advancement(req: OverrideRequest):
    try:
        res = _advancer.apply_manual_overrides(req.before, req.batting_result, _batter(req.batter_id), req.overrides)
    except AdvancementError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return _advancement_response(res)


@app.post("/v1/validate/at-bat", response_model=ValidationResponse)
def validate_at_bat(req: AtBatRequest):
    batter = _batter(req.batter_id)
    if req.match_outcomes:
        res = _matrix.validate_at_bat(
            req.before, req.after, req.batting_result, req.rbis, req.runs_scored, outs=req.outs, batter_id=batter
        )
    else:
        data = AtBatValidationData(
            before_state=req.before,
            after_state=req.after,
            batting_result=req.batting_result,
            batter_id=batter,
            rbis=req.rbis,
            outs=req.outs,
            runs_scored=tuple(req.runs_scored),
        )
        res = _engine.validate_at_bat(data)
    maybe_log_validation(
        "/v1/validate/at-bat",
        req.batting_result,
        str(req.before),
        str(req.after),
        res,
        path=_settings.telemetry_path,
        enabled=_settings.telemetry_enabled or None,
    )
    return _validation_response(res)


@app.post("/v1/validate/outcome", response_model=OutcomeCheckResponse)
def validate_outcome(req: OutcomeCheckRequest):
    if req.rbis > len(req.runs_scored):
        return OutcomeCheckResponse(valid=False)
    candidate = AdvancementOutcome(
        after_state=req.after,
        rbis=req.rbis,
        runs_scored=tuple(req.runs_scored),
        outs=req.outs,
        description="Custom",
    )
    ok = _generator.validate_outcome(req.before, req.batting_result, _batter(req.batter_id), candidate)
    return OutcomeCheckResponse(valid=ok)
