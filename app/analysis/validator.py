from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError

from app.schemas.resume import ResumeAnalysis

from .scoring import score_label

logger = logging.getLogger(__name__)

ROOT_FIELD = "<root>"


class SchemaViolation(ValueError):
    """Raised when an analysis payload does not match the result contract."""

    def __init__(self, fields: list[str], errors: list[dict[str, Any]] | None = None):
        self.fields = fields
        self.errors = errors or []
        super().__init__(f"Analysis payload failed validation for fields: {', '.join(fields)}")


def _violated_fields(exc: ValidationError) -> list[str]:
    fields: list[str] = []
    for error in exc.errors():
        loc = error.get("loc") or ()
        name = str(loc[0]) if loc else ROOT_FIELD
        if name not in fields:
            fields.append(name)
    return fields


def validate_analysis(payload: Any) -> ResumeAnalysis:
    if not isinstance(payload, dict):
        raise SchemaViolation(
            [ROOT_FIELD],
            [{"loc": [], "msg": f"expected a JSON object, got {type(payload).__name__}"}],
        )

    try:
        analysis = ResumeAnalysis.model_validate(payload)
    except ValidationError as exc:
        fields = _violated_fields(exc)
        logger.warning("analysis_schema_violation fields=%s", fields)
        errors = [
            {"loc": [str(part) for part in error.get("loc", ())], "msg": error.get("msg", "")}
            for error in exc.errors()
        ]
        raise SchemaViolation(fields, errors) from exc

    expected = score_label(analysis.score)
    if analysis.score_label != expected:
        logger.warning(
            "analysis_score_label_mismatch score=%s label=%s expected=%s",
            analysis.score,
            analysis.score_label,
            expected,
        )
    return analysis
