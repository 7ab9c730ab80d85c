"""
QuizState TypedDict — shared memory for the LangGraph quiz pipeline.

Input keys (mode, file_path, upload_dir, text, number_of_questions) are set
once by FastAPI and never modified. Each node writes only its own output keys
and appends to logs / pipeline_trace.

  - mode="pdf":  reader → generator
  - mode="text": generator (text already validated by the route)
"""

from __future__ import annotations

from typing import Any, TypedDict


class QuizState(TypedDict, total=False):
    # ── INIT — set by FastAPI before graph.invoke() ──────────────────────────
    mode: str                   # "pdf" | "text"
    file_path: str              # Stored upload, relative to upload_dir (pdf only)
    upload_dir: str             # Directory uploads are confined to (pdf only)
    number_of_questions: int
    logs: list[dict]            # Accumulates { agent, msg, ts } entries
    pipeline_trace: list[dict]  # Accumulates { agent, started_at, ms }

    # ── INIT (text) / reader OUTPUT (pdf) ────────────────────────────────────
    text: str

    # ── generator OUTPUT ─────────────────────────────────────────────────────
    quiz: list[dict[str, Any]]  # [{question, options, correct_answer}, ...]
