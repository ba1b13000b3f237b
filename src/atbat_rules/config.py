from pathlib import Path
from typing import Dict, Optional

from pydantic import BaseModel
import yaml

from .values.outcomes import OutcomeParameters

DEFAULT_SETTINGS_PATH = "config/settings.example.yaml"


class Settings(BaseModel):
    default_parameters: OutcomeParameters = OutcomeParameters.STANDARD
    batter_id: str = "batter"
    rule_states: Dict[str, bool] = {}
    default_rule_enabled: bool = True
    host: str = "0.0.0.0"
    port: int = 8000
    telemetry_enabled: bool = False
    telemetry_path: Optional[str] = None
    log_level: str = "INFO"


def load_settings(path: str = DEFAULT_SETTINGS_PATH) -> Settings:
    p = Path(path)
    if not p.exists():
        return Settings()
    with open(p, "r") as f:
        y = yaml.safe_load(f) or {}
    e = y.get("engine", {}) or {}
    v = y.get("validation", {}) or {}
    s = y.get("service", {}) or {}
    t = y.get("telemetry", {}) or {}
    lg = y.get("logging", {}) or {}
    return Settings(
        default_parameters=e.get("default_parameters", "standard"),
        batter_id=e.get("batter_id", "batter"),
        rule_states=v.get("rules", {}) or {},
        default_rule_enabled=v.get("default_enabled", True),
        host=s.get("host", "0.0.0.0"),
        port=s.get("port", 8000),
        telemetry_enabled=t.get("enabled", False),
        telemetry_path=t.get("path"),
        log_level=lg.get("level", "INFO"),
    )
