import logging
from functools import lru_cache

from app.ai.config import AIConfig, load_ai_config
from app.ai.types import TextGenerator

from app.ai.providers.openai_provider import OpenAIProvider

logger = logging.getLogger(__name__)

_open_providers: list[OpenAIProvider] = []


def _looks_like_placeholder(value: str) -> bool:
    lower = value.strip().lower()
    return lower.startswith("your") or lower.startswith("replace_") or lower in {"changeme", "todo"}


def ai_enabled(cfg: AIConfig) -> bool:
    if not cfg.enabled:
        return False
    if not cfg.api_key or _looks_like_placeholder(cfg.api_key):
        return False
    return True


@lru_cache(maxsize=1)
def _provider(cfg: AIConfig) -> OpenAIProvider:
    provider = OpenAIProvider(
        model=cfg.model,
        api_key=cfg.api_key,
        base_url=cfg.base_url,
        timeout_s=cfg.timeout_s,
        max_retries=cfg.max_retries,
        temperature=cfg.temperature,
    )
    _open_providers.append(provider)
    return provider


def get_text_generator() -> TextGenerator | None:
    """Return the shared generator for the current config, or None to use the fallback."""
    cfg = load_ai_config()
    if not ai_enabled(cfg):
        logger.info("text_generator_disabled provider=%s", cfg.provider)
        return None
    return _provider(cfg)


async def close_text_generators() -> None:
    _provider.cache_clear()
    while _open_providers:
        await _open_providers.pop().close()
