from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping

DEFAULT_ROLE = "general"
SUPPORTED_ROLES: tuple[str, ...] = (
    "general",
    "frontend",
    "backend",
    "fullstack",
    "data",
    "design",
    "product",
    "marketing",
    "sales",
)

_KEYWORDS_CONFIG_PATH = Path(__file__).resolve().parents[2] / "config" / "keywords.yaml"


@dataclass(frozen=True)
class RoleKeywords:
    role: str
    label: str
    found: tuple[str, ...]
    missing: tuple[str, ...]


def _as_terms(value: Any, *, role: str, key: str) -> tuple[str, ...]:
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise RuntimeError(
            f"Invalid keyword config '{_KEYWORDS_CONFIG_PATH}': '{role}.{key}' must be a list of strings."
        )
    return tuple(item.strip() for item in value if item.strip())


def _parse_keywords(parsed: Any) -> Mapping[str, RoleKeywords]:
    if not isinstance(parsed, dict):
        raise RuntimeError(
            f"Invalid keyword config '{_KEYWORDS_CONFIG_PATH}': expected a top-level mapping."
        )

    entries: dict[str, RoleKeywords] = {}
    for role in SUPPORTED_ROLES:
        raw = parsed.get(role)
        if not isinstance(raw, dict):
            raise RuntimeError(
                f"Invalid keyword config '{_KEYWORDS_CONFIG_PATH}': missing entry for role '{role}'."
            )
        entries[role] = RoleKeywords(
            role=role,
            label=str(raw.get("label") or role.title()),
            found=_as_terms(raw.get("found"), role=role, key="found"),
            missing=_as_terms(raw.get("missing"), role=role, key="missing"),
        )
    return MappingProxyType(entries)


@lru_cache(maxsize=1)
def load_role_keywords() -> Mapping[str, RoleKeywords]:
    """Load config/keywords.yaml once and return a read-only role mapping."""
    if not _KEYWORDS_CONFIG_PATH.exists():
        raise RuntimeError(
            f"Keyword config not found at '{_KEYWORDS_CONFIG_PATH}'. "
            "Expected file: config/keywords.yaml"
        )

    try:
        import yaml  # type: ignore[import-not-found]
    except Exception as exc:
        raise RuntimeError(
            "Unable to parse keyword config because PyYAML is unavailable. "
            "Install dependency: PyYAML."
        ) from exc

    try:
        raw = _KEYWORDS_CONFIG_PATH.read_text(encoding="utf-8")
    except OSError as exc:
        raise RuntimeError(
            f"Failed to read keyword config '{_KEYWORDS_CONFIG_PATH}': {exc}"
        ) from exc

    try:
        parsed = yaml.safe_load(raw)
    except yaml.YAMLError as exc:  # type: ignore[attr-defined]
        raise RuntimeError(
            f"Invalid YAML in keyword config '{_KEYWORDS_CONFIG_PATH}': {exc}"
        ) from exc

    return _parse_keywords(parsed)


def normalize_job_role(raw: str | None) -> str:
    """Map free-form role input onto a supported role, defaulting to general."""
    value = (raw or "").strip().lower()
    if value in SUPPORTED_ROLES:
        return value
    return DEFAULT_ROLE


def get_role_keywords(role: str | None) -> RoleKeywords:
    return load_role_keywords()[normalize_job_role(role)]
