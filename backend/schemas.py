"""
Pydantic v2 models — the JSON contract of the /api/quiz endpoints.

Field names match the frontend 1:1 (camelCase inside ``metadata`` is intentional).
Formatter inputs stay loosely typed (``Any``) so shape errors come from the
formatter's own validation rather than a 422.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Literal, Optional, Union

from pydantic import BaseModel, Field

OptionKey = Literal["A", "B", "C", "D"]


# ---------------------------------------------------------------------------
# Export formats
# ---------------------------------------------------------------------------

class ExportFormat(str, Enum):
    JSON = "json"
    CSV = "csv"
    TXT = "txt"

    @property
    def media_type(self) -> str:
        return _MEDIA_TYPES[self]


_MEDIA_TYPES = {
    ExportFormat.JSON: "application/json",
    ExportFormat.CSV: "text/csv",
    ExportFormat.TXT: "text/plain",
}


# ---------------------------------------------------------------------------
# Generated quiz (producer side)
# ---------------------------------------------------------------------------

class QuestionRecord(BaseModel):
    """One generated multiple-choice question, as returned by the model."""
    question: str
    options: dict[str, Any]
    correct_answer: OptionKey


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------

class TextQuizRequest(BaseModel):
    text: Optional[Any] = None
    questions: Optional[Union[int, str]] = None


class DisplayRequest(BaseModel):
    quiz: Any = None


class ExportRequest(BaseModel):
    quiz: Any = None
    format: str = "json"
    delimiter: Optional[str] = ","


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------

class QuizMetadata(BaseModel):
    filename: Optional[str] = None
    textLength: int
    questionsGenerated: int
    processingTime: Optional[int] = None  # ms, PDF uploads only


class QuizResponse(BaseModel):
    success: Literal[True] = True
    quiz: list[dict[str, Any]]
    metadata: QuizMetadata


class ErrorResponse(BaseModel):
    success: Literal[False] = False
    error: str
    details: Optional[dict[str, Any]] = Field(default=None)
