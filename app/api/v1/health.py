from fastapi import APIRouter

from app.ai.config import load_ai_config
from app.ai.factory import ai_enabled

router = APIRouter()


@router.get("/health", summary="Health Check", description="Check the health status of the application.")
async def health_check():
    cfg = load_ai_config()
    return {
        "status": "healthy",
        "analysis_mode": "model" if ai_enabled(cfg) else "fallback",
    }
