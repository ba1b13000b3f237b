from __future__ import annotations

import csv
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from ..values.violations import ValidationResult

FIELDS = ["ts", "route", "result", "before", "after", "valid", "violations"]


def maybe_log_validation(
    route: str,
    result_code: str,
    before: str,
    after: str,
    validation: ValidationResult,
    path: Optional[str] = None,
    enabled: Optional[bool] = None,
) -> None:
    """Append a CSV line describing one validation call if telemetry is on.

    Enable with VALIDATION_LOG_ENABLE=1 (or enabled=True). VALIDATION_LOG_PATH
    is used when no path is passed; otherwise artifacts/validation_logs.csv.
    """
    try:
        if enabled is None:
            enabled = os.environ.get("VALIDATION_LOG_ENABLE", "0") in {"1", "true", "TRUE", "yes", "YES"}
        if not enabled:
            return
        path = path or os.environ.get("VALIDATION_LOG_PATH")
        if not path:
            root = Path(__file__).resolve().parents[3]
            path = str(root / "artifacts" / "validation_logs.csv")
        p = Path(path)
        p.parent.mkdir(parents=True, exist_ok=True)
        row = {
            "ts": datetime.now(timezone.utc).isoformat(timespec="seconds"),
            "route": route,
            "result": result_code,
            "before": before,
            "after": after,
            "valid": int(validation.is_valid),
            "violations": ";".join(v.type.value for v in validation.violations),
        }
        header_written = p.exists()
        with p.open("a", newline="", encoding="utf-8") as f:
            w = csv.DictWriter(f, fieldnames=FIELDS)
            if not header_written:
                w.writeheader()
            w.writerow(row)
    except Exception:
        # Telemetry is best-effort and never breaks validation
        return
