from __future__ import annotations

import math

from pydantic import BaseModel, ConfigDict, Field, StrictFloat, StrictInt, StrictStr, field_validator
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ResumeAnalysis(_CamelModel):
    score: StrictInt | StrictFloat
    score_label: StrictStr
    strengths: list[StrictStr]
    content_improvements: list[StrictStr]
    format_improvements: list[StrictStr]
    keywords_found: list[StrictStr]
    keywords_missing: list[StrictStr]
    summary: StrictStr | None = None

    @field_validator("score")
    @classmethod
    def _validate_score_range(cls, value: int | float) -> int | float:
        if not math.isfinite(value) or value < 0 or value > 100:
            raise ValueError("score must be between 0 and 100")
        return value


class AnalysisResponse(ResumeAnalysis):
    using_fallback: bool = False


class ResumeCreate(_CamelModel):
    job_role: str | None = None
    file_name: str = Field(min_length=1, max_length=255)
    original_text: str
    analysis: str
    created_at: str


class ResumeUpdate(_CamelModel):
    job_role: str | None = None
    file_name: str | None = Field(default=None, min_length=1, max_length=255)
    original_text: str | None = None
    analysis: str | None = None


class ResumeRecord(ResumeCreate):
    id: int
