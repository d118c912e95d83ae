from __future__ import annotations

from app.ai.types import ChatMessage

from .keywords import DEFAULT_ROLE, get_role_keywords, normalize_job_role
from .scoring import SCORE_LABEL_RANGES, SCORE_LABELS

SYSTEM_PROMPT = (
    "You are an expert resume analyst and career advisor specializing in helping job seekers "
    "optimize their resumes for ATS (Applicant Tracking Systems) and improve their chances of "
    "getting interviews."
)


def _role_instruction(job_role: str | None) -> str:
    role = normalize_job_role(job_role)
    if role == DEFAULT_ROLE:
        return "Please provide a general analysis of this resume."
    label = get_role_keywords(role).label
    return f"The candidate is applying for {label} positions. Please tailor your analysis to this role."


def _score_ranges() -> str:
    return "\n".join(f'- {low}-{high}: "{label}"' for low, high, label in SCORE_LABEL_RANGES)


def build_analysis_prompt(resume_text: str, job_role: str | None = None) -> str:
    labels = ", ".join(f'"{label}"' for label in SCORE_LABELS[:-1]) + f', or "{SCORE_LABELS[-1]}"'
    return (
        "Please analyze the following resume text and provide detailed feedback in JSON format.\n"
        f"{_role_instruction(job_role)}\n\n"
        "Resume Text:\n"
        '"""\n'
        f"{resume_text}\n"
        '"""\n\n'
        "Evaluate the resume for ATS compatibility, strengths, and areas for improvement. "
        "Then provide a detailed analysis in the following JSON format with these exact fields:\n\n"
        "{\n"
        '  "score": <integer between 0-100 representing ATS compatibility>,\n'
        f'  "scoreLabel": <string describing the score: {labels}>,\n'
        '  "strengths": [<array of strings highlighting the resume\'s strengths>],\n'
        '  "contentImprovements": [<array of strings with content improvement suggestions>],\n'
        '  "formatImprovements": [<array of strings with formatting improvement suggestions>],\n'
        '  "keywordsFound": [<array of job-relevant keywords found in the resume>],\n'
        '  "keywordsMissing": [<array of job-relevant keywords that should be considered for inclusion>],\n'
        '  "summary": <optional brief overall assessment as a string>\n'
        "}\n\n"
        "For the score, use these ranges:\n"
        f"{_score_ranges()}\n\n"
        "For strengths, find 3-5 positive aspects of the resume.\n"
        "For improvements, suggest 3-5 specific content changes and 3-5 formatting changes.\n"
        "For keywords, list relevant industry terms found in the resume and suggest 5-10 additional relevant terms.\n\n"
        "Only return a single valid JSON object with these exact fields. "
        "Do not include explanations or any other text outside of the JSON object.\n"
    )


def build_analysis_messages(resume_text: str, job_role: str | None = None) -> list[ChatMessage]:
    return [
        ChatMessage(role="system", content=SYSTEM_PROMPT),
        ChatMessage(role="user", content=build_analysis_prompt(resume_text, job_role)),
    ]
