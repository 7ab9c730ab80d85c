"""
Quiz formatter — display projection + export serialization.

  format_quiz_for_display()  — renames fields for the frontend and assigns 1-based ids
  format_quiz_for_export()   — serializes a quiz to JSON, CSV or plain text

Both functions are pure: no I/O, no logging, no shared state.

Failure kinds:
  QuizDataError / UnsupportedFormatError — validated, raised before any record is read
  TypeError                              — a record's ``options`` is not a mapping where
                                           CSV/TXT needs it; intentionally left unwrapped
"""

import json
from collections.abc import Mapping
from typing import Any

EXPORT_FORMATS = ("json", "csv", "txt")


class QuizFormatError(ValueError):
    """Base class for validated formatter failures."""


class QuizDataError(QuizFormatError):
    """The quiz value is not a (non-empty) sequence of records."""


class UnsupportedFormatError(QuizFormatError):
    """The export format tag is not one of EXPORT_FORMATS."""


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _is_quiz_sequence(value: Any) -> bool:
    # str/bytes are sequences too, but never a quiz
    return isinstance(value, (list, tuple))


def _field(record: Any, name: str) -> Any:
    """Read a record field, yielding None for missing keys or non-mapping records."""
    if isinstance(record, Mapping):
        return record.get(name)
    return None


def _options(record: Any) -> Mapping:
    """Return a record's ``options`` mapping, raising TypeError for anything else."""
    options = _field(record, "options")
    if not isinstance(options, Mapping):
        raise TypeError(f"question options must be a mapping, not {type(options).__name__}")
    return options


def _quoted(value: Any) -> str:
    return f'"{value}"'


# ---------------------------------------------------------------------------
# Display projection
# ---------------------------------------------------------------------------


def format_quiz_for_display(quiz: Any) -> list[dict[str, Any]]:
    """Shape a quiz for presentation, adding a sequential ``id`` to each question.

    Fields are copied verbatim; ``correct_answer`` is exposed as ``correctAnswer``.

    Raises:
        QuizDataError: ``quiz`` is not a list or tuple.
    """
    if not _is_quiz_sequence(quiz):
        raise QuizDataError("Quiz data must be an array.")

    return [
        {
            "id": index + 1,
            "question": _field(record, "question"),
            "options": _field(record, "options"),
            "correctAnswer": _field(record, "correct_answer"),
        }
        for index, record in enumerate(quiz)
    ]


# ---------------------------------------------------------------------------
# Export serialization
# ---------------------------------------------------------------------------


def _export_csv(quiz, delimiter: str) -> str:
    # Columns come from the first record only; later records are not re-derived.
    option_keys = list(_options(quiz[0]))

    header = (
        "Question"
        + delimiter
        + delimiter.join(f"Option {key}" for key in option_keys)
        + delimiter
        + "Correct Answer\n"
    )
    rows = [header]
    for record in quiz:
        options = _options(record)
        cells = [_quoted(options[key] if key in options else None) for key in option_keys]
        rows.append(
            _quoted(_field(record, "question"))
            + delimiter
            + delimiter.join(cells)
            + delimiter
            + _quoted(_field(record, "correct_answer"))
            + "\n"
        )
    return "".join(rows)


def _export_txt(quiz) -> str:
    lines = []
    for index, record in enumerate(quiz, 1):
        lines.append(f"{index}. {_field(record, 'question')}\n")
        for key, value in _options(record).items():
            lines.append(f"   {key}) {value}\n")
        lines.append(f"   Answer: {_field(record, 'correct_answer')}\n\n")
    return "".join(lines)


def format_quiz_for_export(quiz: Any, format: str = "json", delimiter: str = ",") -> str:
    """Serialize a quiz for download.

    Args:
        quiz: Non-empty list of question records (``question``, ``options``,
            ``correct_answer``).
        format: ``"json"``, ``"csv"`` or ``"txt"`` (case-sensitive).
        delimiter: Column separator for CSV, used literally via ``str()``.

    Returns:
        The serialized quiz. CSV fields are wrapped in double quotes without
        escaping embedded quotes or delimiters.

    Raises:
        QuizDataError: ``quiz`` is not a non-empty list or tuple.
        UnsupportedFormatError: ``format`` is not a supported tag.
        TypeError: CSV/TXT export of a record whose ``options`` is missing or
            not a mapping.
    """
    if not _is_quiz_sequence(quiz) or len(quiz) == 0:
        raise QuizDataError("Quiz data must be a non-empty array.")

    if format not in EXPORT_FORMATS:
        raise UnsupportedFormatError(
            f"Unsupported format: {format}. Use one of: {', '.join(EXPORT_FORMATS)}"
        )

    if format == "csv":
        return _export_csv(quiz, str(delimiter))
    if format == "txt":
        return _export_txt(quiz)
    return json.dumps(quiz, indent=2, ensure_ascii=False)
