from __future__ import annotations

import logging
from io import BytesIO
from typing import Any, Sequence

from pypdf import PdfReader

from .models import ParsedBlock, ParsedDoc

logger = logging.getLogger(__name__)

PAGE_SEPARATOR = "\n\n"


class ExtractionError(ValueError):
    pass


def _baseline(cm: Sequence[float], tm: Sequence[float]) -> float:
    # y of the text origin in device space (text matrix x current transformation matrix).
    return round(float(tm[4]) * float(cm[1]) + float(tm[5]) * float(cm[3]) + float(cm[5]), 3)


def _extract_page_text(page: Any) -> str:
    parts: list[str] = []
    last_y: float | None = None

    def visit(text: str, cm: Any, tm: Any, _font_dict: Any, _font_size: Any) -> None:
        nonlocal last_y
        fragment = text.strip("\r\n")
        if not fragment:
            return
        y = _baseline(cm, tm)
        if last_y is not None and y != last_y:
            parts.append("\n")
        parts.append(fragment)
        last_y = y

    fallback = page.extract_text(visitor_text=visit) or ""
    if parts:
        return "".join(parts)
    return fallback


def extract_pdf_text(content: bytes) -> ParsedDoc:
    """Extract plain text from every page of a PDF.

    Fragments sharing a baseline stay on one line, with the spacing pypdf
    reports between them; a change of baseline starts a new line. Pages are separated by a blank line. Any parser
    failure raises ``ExtractionError``; a PDF without a text layer yields
    an empty ``text``.
    """
    try:
        reader = PdfReader(BytesIO(content))
        if reader.is_encrypted:
            raise ExtractionError("PDF is password-protected.")
        blocks: list[ParsedBlock] = []
        for index, page in enumerate(reader.pages, start=1):
            page_text = _extract_page_text(page)
            if page_text.strip():
                blocks.append(ParsedBlock(page=index, text=page_text))
        page_count = len(reader.pages)
    except ExtractionError:
        raise
    except Exception as exc:
        logger.warning("pdf_extraction_failed bytes=%s: %s", len(content), exc)
        raise ExtractionError(f"Failed to extract text from PDF: {exc}") from exc

    warnings: list[str] = []
    if not blocks:
        warnings.append("No extractable text found in PDF.")
    return ParsedDoc(
        source_type="pdf",
        text=PAGE_SEPARATOR.join(block.text for block in blocks),
        page_count=page_count,
        blocks=blocks,
        parsing_warnings=warnings,
    )
