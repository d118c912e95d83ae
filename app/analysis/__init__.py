from .keywords import (
    DEFAULT_ROLE,
    SUPPORTED_ROLES,
    RoleKeywords,
    get_role_keywords,
    load_role_keywords,
    normalize_job_role,
)
from .prompt import SYSTEM_PROMPT, build_analysis_messages, build_analysis_prompt
from .scoring import FALLBACK_SUMMARY, SCORE_LABEL_RANGES, fallback_analysis, score_label
from .validator import SchemaViolation, validate_analysis

__all__ = [
    "DEFAULT_ROLE",
    "SUPPORTED_ROLES",
    "RoleKeywords",
    "get_role_keywords",
    "load_role_keywords",
    "normalize_job_role",
    "SYSTEM_PROMPT",
    "build_analysis_messages",
    "build_analysis_prompt",
    "FALLBACK_SUMMARY",
    "SCORE_LABEL_RANGES",
    "fallback_analysis",
    "score_label",
    "SchemaViolation",
    "validate_analysis",
]
