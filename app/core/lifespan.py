import contextlib
from contextlib import asynccontextmanager
import asyncio
import logging

from app.ai.factory import close_text_generators
from app.analysis.keywords import load_role_keywords
from app.storage.db import get_resume_store

logger = logging.getLogger(__name__)

PURGE_INTERVAL_S = 3600


@asynccontextmanager
async def lifespan(app):
    load_role_keywords()
    store = get_resume_store()
    store.init_db()

    stop_event = asyncio.Event()

    async def periodic_purge() -> None:
        while not stop_event.is_set():
            try:
                deleted = store.purge_old_runs()
                if deleted:
                    logger.info("analysis_runs_retention_purge deleted=%s", deleted)
            except Exception as exc:  # pragma: no cover - defensive guard
                logger.warning("analysis_runs_retention_purge_failed: %s", exc)
            try:
                await asyncio.wait_for(stop_event.wait(), timeout=PURGE_INTERVAL_S)
            except asyncio.TimeoutError:
                continue

    purge_task = asyncio.create_task(periodic_purge())
    yield
    stop_event.set()
    if not purge_task.done():
        purge_task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await purge_task
    await close_text_generators()
    store.close()
