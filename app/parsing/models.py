from __future__ import annotations

from pydantic import BaseModel, Field


class ParsedBlock(BaseModel):
    page: int
    text: str


class ParsedDoc(BaseModel):
    source_type: str = "pdf"
    text: str
    page_count: int = Field(default=0, ge=0)
    blocks: list[ParsedBlock] = Field(default_factory=list)
    parsing_warnings: list[str] = Field(default_factory=list)

    @property
    def has_text(self) -> bool:
        return bool(self.text.strip())
