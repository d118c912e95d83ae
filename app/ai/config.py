import os
from dataclasses import dataclass

SUPPORTED_PROVIDERS = ("openai",)


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    return value.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_number(name: str, default: str, cast):
    raw = (os.getenv(name) or "").strip() or default
    try:
        return cast(raw)
    except ValueError as exc:
        raise RuntimeError(f"{name} must be a valid {cast.__name__}, got '{raw}'.") from exc


@dataclass(frozen=True)
class AIConfig:
    enabled: bool
    provider: str
    model: str
    temperature: float
    api_key: str
    base_url: str | None
    timeout_s: float
    max_retries: int


def load_ai_config() -> AIConfig:
    cfg = AIConfig(
        enabled=_env_bool("AI_ENABLED", True),
        provider=(os.getenv("AI_PROVIDER") or "openai").strip().lower(),
        model=(os.getenv("AI_MODEL") or os.getenv("OPENAI_MODEL") or "gpt-4o").strip(),
        temperature=_env_number("AI_TEMPERATURE", "0.5", float),
        api_key=(os.getenv("OPENAI_API_KEY") or "").strip(),
        base_url=(os.getenv("OPENAI_BASE_URL") or "").strip() or None,
        timeout_s=_env_number("OPENAI_TIMEOUT_S", "30", float),
        max_retries=_env_number("OPENAI_MAX_RETRIES", "0", int),
    )

    if cfg.provider not in SUPPORTED_PROVIDERS:
        raise RuntimeError(
            f"Unsupported AI_PROVIDER='{cfg.provider}'. Supported: {', '.join(SUPPORTED_PROVIDERS)}."
        )
    if not 0.0 <= cfg.temperature <= 2.0:
        raise RuntimeError("AI_TEMPERATURE must be between 0 and 2.")
    if cfg.max_retries < 0:
        raise RuntimeError("OPENAI_MAX_RETRIES must not be negative.")
    return cfg
