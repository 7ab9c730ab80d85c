"""
FastAPI app — PDF / text → multiple-choice quiz.

Endpoints:
  POST  /api/quiz/generate   Multipart PDF upload (+ questions count) → quiz
  POST  /api/quiz/text       JSON {text, questions} → quiz
  GET   /api/quiz/test       Claude connectivity probe
  POST  /api/quiz/display    JSON {quiz} → display-ready quiz with ids
  POST  /api/quiz/export     JSON {quiz, format, delimiter} → downloadable payload
  GET   /health              Liveness probe
"""

import asyncio
import logging
import re
import traceback
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, Optional

from fastapi import FastAPI, File, Form, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from config import ensure_upload_dir, get_settings
from agents.generator import check_connection
from graph import graph
from schemas import (
    DisplayRequest,
    ErrorResponse,
    ExportFormat,
    ExportRequest,
    QuizMetadata,
    QuizResponse,
    TextQuizRequest,
)
from state import QuizState
from tools.formatter import QuizFormatError, format_quiz_for_display, format_quiz_for_export
from tools.pdf_reader import TextValidationError, validate_text
from tools.uploads import UploadError, save_upload

# ---------------------------------------------------------------------------
# App setup
# ---------------------------------------------------------------------------

logger = logging.getLogger("quiz")
logging.basicConfig(level=logging.INFO)

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    413: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}

ENDPOINTS = {
    "POST /api/quiz/generate": "Upload PDF file",
    "POST /api/quiz/text": "Send text directly",
    "POST /api/quiz/display": "Format a quiz for display",
    "POST /api/quiz/export": "Export a quiz as json, csv or txt",
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    ensure_upload_dir(settings)
    logger.info("Anthropic API key configured: %s", settings.api_key_configured)
    yield


app = FastAPI(title="PDF Quiz Generator", version="1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _error(message: str, status_code: int, details: Optional[dict[str, Any]] = None) -> JSONResponse:
    body = ErrorResponse(error=message, details=details)
    return JSONResponse(body.model_dump(exclude_none=True), status_code=status_code)


def _question_count(raw: Any, default: int) -> int:
    """Parse the leading integer of the requested question count (``"3.5"`` -> 3).

    Non-numeric, zero or negative values fall back to ``default``.
    """
    match = _LEADING_INT.match(str(raw))
    if match is None:
        return default
    count = int(match.group(1))
    return count if count > 0 else default


async def _run_pipeline(state: QuizState) -> QuizState:
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, graph.invoke, state)


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@app.get("/health")
async def health():
    """Liveness probe."""
    return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}


@app.post(
    "/api/quiz/generate",
    response_model=QuizResponse,
    response_model_exclude_none=True,
    responses=ERROR_RESPONSES,
)
async def quiz_generate(
    file: UploadFile | None = File(None),
    questions: Optional[str] = Form(None),
):
    """Generate a quiz from an uploaded PDF."""
    settings = get_settings()
    logger.info("POST /api/quiz/generate — starting PDF quiz generation")

    if file is None:
        logger.info("No file uploaded")
        return _error("No PDF file uploaded", 400)

    try:
        stored = await save_upload(file, settings)
    except UploadError as exc:
        logger.error("Upload error: %s", exc)
        return _error(str(exc), exc.status_code)

    number_of_questions = _question_count(questions, settings.default_question_count)
    initial_state: QuizState = {
        "mode": "pdf",
        "file_path": stored.filename,
        "upload_dir": str(settings.upload_dir),
        "number_of_questions": number_of_questions,
        "logs": [],
        "pipeline_trace": [],
    }

    try:
        result = await _run_pipeline(initial_state)
    except Exception as exc:
        logger.error("PDF quiz generation failed (%s): %s", type(exc).__name__, exc)
        logger.error("File info at error: path=%s original=%s", stored.path, stored.original_name)
        details = None
        if settings.is_development:
            details = {
                "stack": traceback.format_exc(),
                "fileInfo": {"path": str(stored.path), "originalName": stored.original_name, "size": stored.size},
            }
        return _error(str(exc), 500, details)

    reader_ms = next((t["ms"] for t in result["pipeline_trace"] if t["agent"] == "reader"), None)
    quiz = result["quiz"]
    logger.info("Quiz generated successfully with %d questions", len(quiz))

    return QuizResponse(
        quiz=quiz,
        metadata=QuizMetadata(
            filename=stored.original_name,
            textLength=len(result["text"]),
            questionsGenerated=len(quiz),
            processingTime=reader_ms,
        ),
    )


@app.post(
    "/api/quiz/text",
    response_model=QuizResponse,
    response_model_exclude_none=True,
    responses={400: ERROR_RESPONSES[400], 500: ERROR_RESPONSES[500]},
)
async def quiz_text(req: TextQuizRequest):
    """Generate a quiz from raw text."""
    settings = get_settings()

    if not req.text:
        return _error("Text is required", 400)

    try:
        text = validate_text(req.text, settings.min_text_length)
    except TextValidationError as exc:
        return _error(str(exc), 400)

    logger.info("Processing text, length: %d", len(text))
    initial_state: QuizState = {
        "mode": "text",
        "text": text,
        "number_of_questions": _question_count(req.questions, settings.default_question_count),
        "logs": [],
        "pipeline_trace": [],
    }

    try:
        result = await _run_pipeline(initial_state)
    except Exception as exc:
        logger.error("Text quiz generation failed: %s", exc)
        return _error(str(exc), 500)

    quiz = result["quiz"]
    return QuizResponse(
        quiz=quiz,
        metadata=QuizMetadata(textLength=len(text), questionsGenerated=len(quiz)),
    )


@app.get("/api/quiz/test")
async def quiz_test():
    """Report whether the Claude API is reachable."""
    loop = asyncio.get_running_loop()
    connected = await loop.run_in_executor(None, check_connection)
    return {
        "success": True,
        "message": "Quiz API is working!",
        "ai_status": "Connected" if connected else "Not Connected",
        "endpoints": ENDPOINTS,
    }


@app.post("/api/quiz/display", responses={400: ERROR_RESPONSES[400]})
async def quiz_display(req: DisplayRequest):
    """Return the quiz with sequential ids and camelCase answer field."""
    try:
        return {"success": True, "quiz": format_quiz_for_display(req.quiz)}
    except QuizFormatError as exc:
        return _error(str(exc), 400)


@app.post("/api/quiz/export", responses={400: ERROR_RESPONSES[400]})
async def quiz_export(req: ExportRequest):
    """Serialize the quiz as a file download."""
    try:
        payload = format_quiz_for_export(req.quiz, req.format, req.delimiter)
    except QuizFormatError as exc:
        return _error(str(exc), 400)
    except TypeError as exc:
        # Unvalidated shape problem (e.g. first record without options)
        logger.warning("Export failed on malformed quiz: %s", exc)
        return _error(f"Malformed quiz data: {exc}", 400)

    export_format = ExportFormat(req.format)
    return Response(
        content=payload,
        media_type=export_format.media_type,
        headers={"Content-Disposition": f'attachment; filename="quiz.{export_format.value}"'},
    )
