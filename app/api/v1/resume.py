import logging

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status

from app.ai.factory import get_text_generator
from app.ai.types import TextGenerator
from app.analysis.validator import SchemaViolation
from app.core.config import settings
from app.schemas.resume import AnalysisResponse
from app.services.analysis_service import ResumeAnalysisError, analyze_resume
from app.storage.db import ResumeStore, get_resume_store

logger = logging.getLogger(__name__)

router = APIRouter()

READ_CHUNK_BYTES = 1024 * 64


async def _read_upload(file: UploadFile) -> bytes:
    chunks: list[bytes] = []
    total = 0
    while True:
        chunk = await file.read(READ_CHUNK_BYTES)
        if not chunk:
            break
        total += len(chunk)
        if total > settings.max_upload_bytes:
            raise HTTPException(
                status_code=413,
                detail=f"File size exceeds {settings.max_upload_bytes // (1024 * 1024)}MB limit",
            )
        chunks.append(chunk)
    return b"".join(chunks)


@router.post(
    "/resume/analyze",
    response_model=AnalysisResponse,
    response_model_exclude_none=True,
)
async def resume_analyze(
    file: UploadFile | None = File(default=None),
    job_role: str = Form(default="", alias="jobRole"),
    generator: TextGenerator | None = Depends(get_text_generator),
    store: ResumeStore = Depends(get_resume_store),
):
    if file is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No resume file uploaded")

    content = await _read_upload(file)
    try:
        return await analyze_resume(
            content=content,
            mime_type=file.content_type,
            filename=file.filename,
            job_role=job_role,
            generator=generator,
            store=store,
        )
    except ResumeAnalysisError as exc:
        raise HTTPException(status_code=exc.status_code, detail=str(exc)) from exc
    except SchemaViolation as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={
                "message": "Invalid response format from analysis service",
                "fields": exc.fields,
                "errors": exc.errors,
            },
        ) from exc
    except Exception as exc:
        logger.exception("resume_analysis_failed file=%s", file.filename)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(exc) or "An unknown error occurred during resume analysis",
        ) from exc
