from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any

from .keywords import get_role_keywords

# (low, high, label), bounds inclusive.
SCORE_LABEL_RANGES: tuple[tuple[int, int, str], ...] = (
    (0, 40, "Poor"),
    (41, 60, "Fair"),
    (61, 80, "Good"),
    (81, 90, "Very Good"),
    (91, 100, "Excellent"),
)
SCORE_LABELS: tuple[str, ...] = tuple(label for _low, _high, label in SCORE_LABEL_RANGES)

FALLBACK_BASE_SCORE = 65
FALLBACK_MAX_SCORE = 90

FALLBACK_SUMMARY = (
    "This resume has a good foundation but could benefit from more specific achievements "
    "and tailored content for the target role."
)

FALLBACK_STRENGTHS: tuple[str, ...] = (
    "Resume is well-structured with clear sections",
    "Experience is presented in a chronological format",
    "Skills are clearly highlighted",
    "Education section is properly formatted",
    "Contact information is complete and easy to find",
)

FALLBACK_CONTENT_IMPROVEMENTS: tuple[str, ...] = (
    "Add more measurable achievements with specific metrics",
    "Tailor your skills section more specifically to the job role",
    "Include relevant certifications or professional development",
    "Add a brief professional summary at the beginning",
    "Enhance descriptions of your most relevant experience",
)

FALLBACK_FORMAT_IMPROVEMENTS: tuple[str, ...] = (
    "Use bullet points consistently for better readability",
    "Ensure consistent formatting of dates and locations",
    "Consider using a cleaner template with more white space",
    "Make sure all sections have clear headings",
    "Keep the resume to 1-2 pages maximum",
)

_PARAGRAPH_SPLIT_RE = re.compile(r"\n\s*\n")
_DIGIT_RE = re.compile(r"\d")


def score_label(score: float) -> str:
    """Return the label for a 0-100 score.

    Each label owns everything up to its upper bound, so fractional
    scores between two rows fall into the higher row.
    """
    if score < 0 or score > 100:
        raise ValueError(f"score must be between 0 and 100, got {score}")
    for _low, high, label in SCORE_LABEL_RANGES:
        if score <= high:
            return label
    return SCORE_LABEL_RANGES[-1][2]


@dataclass(frozen=True)
class ResumeTextStats:
    word_count: int
    has_bullets: bool
    has_digits: bool
    paragraph_count: int


def compute_text_stats(resume_text: str) -> ResumeTextStats:
    return ResumeTextStats(
        word_count=len(resume_text.split()),
        has_bullets="•" in resume_text or "-" in resume_text,
        has_digits=bool(_DIGIT_RE.search(resume_text)),
        paragraph_count=len(_PARAGRAPH_SPLIT_RE.split(resume_text)),
    )


def heuristic_score(stats: ResumeTextStats) -> int:
    score = FALLBACK_BASE_SCORE
    if stats.word_count > 300:
        score += 5
    if stats.has_bullets:
        score += 5
    if stats.has_digits:
        score += 5
    if stats.paragraph_count > 5:
        score += 5
    if stats.word_count > 600:
        score -= 5
    return max(0, min(FALLBACK_MAX_SCORE, score))


def fallback_analysis(resume_text: str, job_role: str | None) -> dict[str, Any]:
    """Deterministic analysis used when no trustworthy model reply exists."""
    keywords = get_role_keywords(job_role)
    score = heuristic_score(compute_text_stats(resume_text or ""))
    return {
        "score": score,
        "scoreLabel": score_label(score),
        "strengths": list(FALLBACK_STRENGTHS),
        "contentImprovements": list(FALLBACK_CONTENT_IMPROVEMENTS),
        "formatImprovements": list(FALLBACK_FORMAT_IMPROVEMENTS),
        "keywordsFound": list(keywords.found),
        "keywordsMissing": list(keywords.missing),
        "summary": FALLBACK_SUMMARY,
    }
