from __future__ import annotations

import asyncio
import json
import logging
import time
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from app.ai.types import TextGenerator
from app.analysis.keywords import normalize_job_role
from app.analysis.prompt import build_analysis_messages
from app.analysis.scoring import fallback_analysis
from app.analysis.validator import validate_analysis
from app.core.config import settings
from app.parsing.parse import ExtractionError, extract_pdf_text
from app.schemas.resume import AnalysisResponse, ResumeCreate
from app.storage.db import ResumeStore, utc_now_iso

logger = logging.getLogger(__name__)

PDF_MIME_TYPE = "application/pdf"
FALLBACK_MODEL_NAME = "heuristic"

EXTRACTION_FAILURE_MESSAGE = (
    "Could not extract text from the PDF. Please ensure the file contains text content "
    "and is not password-protected."
)


class ResumeAnalysisError(RuntimeError):
    def __init__(self, message: str, *, status_code: int = 400):
        super().__init__(message)
        self.status_code = status_code


class InvalidInput(ResumeAnalysisError):
    pass


class ExtractionFailure(ResumeAnalysisError):
    pass


class GenerationState(str, Enum):
    BUILDING_PROMPT = "building_prompt"
    CALLING_MODEL = "calling_model"
    PARSING = "parsing"
    SUCCESS = "success"
    FALLBACK = "fallback"


@dataclass
class GenerationOutcome:
    payload: dict[str, Any]
    using_fallback: bool
    state: GenerationState
    model: str = FALLBACK_MODEL_NAME
    error_code: str | None = None
    latency_ms: int = 0
    run_id: str = field(default_factory=lambda: uuid.uuid4().hex)


def _elapsed_ms(started: float) -> int:
    return int((time.perf_counter() - started) * 1000)


async def generate_analysis(
    resume_text: str,
    job_role: str | None,
    generator: TextGenerator | None,
) -> GenerationOutcome:
    """Ask the model for an analysis, substituting the heuristic result on any failure.

    The model is called at most once. Provenance is reported through
    ``GenerationOutcome.using_fallback`` rather than inferred from content.
    """
    started = time.perf_counter()
    state = GenerationState.BUILDING_PROMPT
    messages = build_analysis_messages(resume_text, job_role)

    def fallback(error_code: str) -> GenerationOutcome:
        logger.warning(
            "resume_analysis_fallback reason=%s failed_state=%s role=%s",
            error_code,
            state.value,
            normalize_job_role(job_role),
        )
        return GenerationOutcome(
            payload=fallback_analysis(resume_text, job_role),
            using_fallback=True,
            state=GenerationState.FALLBACK,
            model=generator.model if generator is not None else FALLBACK_MODEL_NAME,
            error_code=error_code,
            latency_ms=_elapsed_ms(started),
        )

    if generator is None:
        return fallback("llm_disabled")

    state = GenerationState.CALLING_MODEL
    try:
        content = await generator.generate(messages)
    except Exception as exc:  # noqa: BLE001 - deterministic fallback is expected
        logger.warning("resume_analysis_model_call_failed model=%s: %s", generator.model, exc)
        return fallback("llm_exception")

    if not content or not content.strip():
        return fallback("empty_response")

    state = GenerationState.PARSING
    try:
        parsed = json.loads(content)
    except json.JSONDecodeError as exc:
        logger.warning("resume_analysis_invalid_json model=%s: %s", generator.model, exc)
        return fallback("invalid_json")

    if not isinstance(parsed, dict):
        return fallback("invalid_json")

    return GenerationOutcome(
        payload=parsed,
        using_fallback=False,
        state=GenerationState.SUCCESS,
        model=generator.model,
        latency_ms=_elapsed_ms(started),
    )


def check_upload(*, content: bytes | None, mime_type: str | None) -> bytes:
    if not content:
        raise InvalidInput("No resume file uploaded")
    if (mime_type or "").split(";")[0].strip().lower() != PDF_MIME_TYPE:
        raise InvalidInput("Only PDF files are accepted")
    if len(content) > settings.max_upload_bytes:
        limit_mb = settings.max_upload_bytes // (1024 * 1024)
        raise InvalidInput(f"File size exceeds {limit_mb}MB limit", status_code=413)
    return content


async def extract_resume_text(content: bytes) -> str:
    try:
        parsed = await asyncio.to_thread(extract_pdf_text, content)
    except ExtractionError as exc:
        raise ExtractionFailure(EXTRACTION_FAILURE_MESSAGE) from exc
    if not parsed.has_text:
        logger.info("resume_extraction_empty pages=%s", parsed.page_count)
        raise ExtractionFailure(EXTRACTION_FAILURE_MESSAGE)
    return parsed.text


def _record_run(store: ResumeStore, outcome: GenerationOutcome, job_role: str) -> None:
    try:
        store.log_analysis_run(
            run_id=outcome.run_id,
            job_role=job_role,
            model=outcome.model,
            status=outcome.state.value,
            using_fallback=outcome.using_fallback,
            error_code=outcome.error_code,
            latency_ms=outcome.latency_ms,
        )
    except Exception:  # pragma: no cover - run logging must not break analyses
        logger.debug("analysis_run_logging_failed", exc_info=True)


async def analyze_resume(
    *,
    content: bytes | None,
    mime_type: str | None,
    filename: str | None,
    job_role: str | None,
    generator: TextGenerator | None,
    store: ResumeStore,
) -> AnalysisResponse:
    payload = check_upload(content=content, mime_type=mime_type)
    role = normalize_job_role(job_role)
    resume_text = await extract_resume_text(payload)

    outcome = await generate_analysis(resume_text, role, generator)
    _record_run(store, outcome, role)

    analysis = validate_analysis(outcome.payload)
    analysis_json = analysis.model_dump_json(by_alias=True, exclude_none=True)

    record = store.create_resume(
        ResumeCreate(
            job_role=role,
            file_name=(filename or "resume.pdf")[:255],
            original_text=resume_text,
            analysis=analysis_json,
            created_at=utc_now_iso(),
        )
    )
    logger.info(
        "resume_analysis_complete id=%s role=%s score=%s fallback=%s",
        record.id,
        role,
        analysis.score,
        outcome.using_fallback,
    )
    return AnalysisResponse(**analysis.model_dump(), using_fallback=outcome.using_fallback)
