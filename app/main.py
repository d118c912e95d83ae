import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import sentry_sdk

from app.ai.config import load_ai_config
from app.api.v1.health import router as health_router
from app.api.v1.resume import router as resume_router
from app.core.cors import cors_middleware_options
from app.core.config import settings
from dotenv import load_dotenv
from app.core.lifespan import lifespan

load_dotenv()
logging.basicConfig(level=settings.log_level, format="%(message)s")
if settings.sentry_dsn:
    sentry_sdk.init(dsn=settings.sentry_dsn)

# Invalid AI_* settings abort startup.
load_ai_config()

app = FastAPI(title="Resume Analysis API", version="0.1.0", lifespan=lifespan)

app.add_middleware(CORSMiddleware, **cors_middleware_options())

app.include_router(health_router, prefix="/v1", tags=["Health"])
app.include_router(resume_router, prefix="/v1", tags=["Resume"])
