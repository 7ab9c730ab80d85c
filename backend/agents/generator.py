"""
Quiz generator — Claude API call + response cleanup + quiz validation.

  generate_quiz_from_text()  — text → list of {question, options, correct_answer} dicts
  check_connection()         — cheap round trip used by GET /api/quiz/test
  generator_node()           — LangGraph node wrapping generate_quiz_from_text()

Failures are NOT swallowed: every error is re-raised as QuizGenerationError
with a user-facing message, and the node lets it propagate out of the graph.
"""

import json
import logging
import re
import time
from typing import Any, Optional

import anthropic
from pydantic import ValidationError

from config import ConfigurationError, Settings, get_settings, require_api_key
from schemas import QuestionRecord
from state import QuizState
from tools.prompts import SYSTEM_PROMPT_QUIZ, build_quiz_prompt

logger = logging.getLogger("quiz.generator")

REQUIRED_OPTION_KEYS = ("A", "B", "C", "D")

MSG_INVALID_KEY = "Invalid API key. Please check your API key configuration."
MSG_RATE_LIMITED = "API quota exceeded or rate limited. Please try again later."
MSG_BAD_FORMAT = "Failed to generate properly formatted quiz. Please try again with different text."
MSG_BLOCKED = "Content was blocked by safety filters. Please try with different text."


class QuizGenerationError(Exception):
    """Quiz could not be generated; the message is safe to show to the client."""


class _UnparseableResponse(Exception):
    pass


class _BlockedResponse(Exception):
    pass


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _parse_llm_json(raw_text: str) -> Any:
    """Parse JSON from Claude's response, handling markdown fences and whitespace.

    Raises json.JSONDecodeError if no valid JSON can be extracted.
    """
    text = raw_text.strip()

    # Strip markdown code fences: ```json ... ``` or ``` ... ```
    fence_match = re.search(r"```(?:json)?\s*\n?(.*?)\n?\s*```", text, re.DOTALL)
    if fence_match:
        text = fence_match.group(1).strip()

    return json.loads(text)


def _validate_quiz(quiz: Any) -> list[dict[str, Any]]:
    """Check the parsed reply against the prompt's contract and normalise each record."""
    if not isinstance(quiz, list):
        raise QuizGenerationError("Generated quiz is not in the expected array format")
    if not quiz:
        raise QuizGenerationError("No questions were generated")

    records = []
    for n, q in enumerate(quiz, 1):
        if not isinstance(q, dict) or not q.get("question") or not q.get("options") or not q.get("correct_answer"):
            raise QuizGenerationError(
                f"Question {n} is missing required fields (question, options, or correct_answer)"
            )

        options = q["options"]
        if not isinstance(options, dict) or not all(options.get(key) for key in REQUIRED_OPTION_KEYS):
            raise QuizGenerationError(f"Question {n} does not have all required options (A, B, C, D)")

        if q["correct_answer"] not in REQUIRED_OPTION_KEYS:
            raise QuizGenerationError(
                f"Question {n} has invalid correct_answer: {q['correct_answer']}. Must be A, B, C, or D."
            )

        try:
            records.append(QuestionRecord.model_validate(q).model_dump())
        except ValidationError as exc:
            raise QuizGenerationError(f"Question {n} has an invalid shape: {exc.error_count()} field error(s)")

    return records


def _request_quiz(client: anthropic.Anthropic, settings: Settings, text: str, number_of_questions: int) -> str:
    response = client.messages.create(
        model=settings.model,
        max_tokens=settings.max_tokens,
        system=SYSTEM_PROMPT_QUIZ,
        messages=[{"role": "user", "content": build_quiz_prompt(text, number_of_questions)}],
    )
    if getattr(response, "stop_reason", None) == "refusal":
        raise _BlockedResponse()
    return response.content[0].text.strip()


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def generate_quiz_from_text(
    text: str,
    number_of_questions: int = 5,
    settings: Optional[Settings] = None,
) -> list[dict[str, Any]]:
    """Ask Claude for ``number_of_questions`` multiple-choice questions about ``text``.

    Raises:
        QuizGenerationError: on any failure (missing text, missing API key,
            API errors, unparseable or invalid reply).
    """
    settings = settings or get_settings()

    if not text or not text.strip():
        raise QuizGenerationError("Text is required to generate quiz")

    try:
        client = anthropic.Anthropic(api_key=require_api_key(settings))
        logger.info("Generating %d questions with %s...", number_of_questions, settings.model)

        content = _request_quiz(client, settings, text, number_of_questions)
        logger.info("Raw Claude response length: %d", len(content))

        try:
            parsed = _parse_llm_json(content)
        except json.JSONDecodeError as exc:
            logger.error("JSON parse error: %s; content head: %s", exc, content[:500])
            raise _UnparseableResponse() from exc

        quiz = _validate_quiz(parsed)

    except QuizGenerationError as exc:
        logger.error("Quiz validation failed: %s", exc)
        raise QuizGenerationError(f"Quiz generation failed: {exc}") from exc
    except ConfigurationError as exc:
        logger.error("%s", exc)
        raise QuizGenerationError(str(exc)) from exc
    except anthropic.AuthenticationError as exc:
        logger.error("Claude API authentication failed: %s", exc)
        raise QuizGenerationError(MSG_INVALID_KEY) from exc
    except anthropic.RateLimitError as exc:
        logger.error("Claude API rate limited: %s", exc)
        raise QuizGenerationError(MSG_RATE_LIMITED) from exc
    except _UnparseableResponse as exc:
        raise QuizGenerationError(MSG_BAD_FORMAT) from exc
    except _BlockedResponse as exc:
        logger.warning("Claude refused to generate a quiz for this text")
        raise QuizGenerationError(MSG_BLOCKED) from exc
    except Exception as exc:
        logger.exception("Claude API error")
        raise QuizGenerationError(f"Quiz generation failed: {exc}") from exc

    logger.info("Successfully generated %d questions", len(quiz))
    return quiz


def check_connection(settings: Optional[Settings] = None) -> bool:
    """Return True if a trivial Claude request succeeds. Never raises."""
    settings = settings or get_settings()
    try:
        client = anthropic.Anthropic(api_key=require_api_key(settings))
        client.messages.create(
            model=settings.model,
            max_tokens=16,
            messages=[{"role": "user", "content": "Say hello"}],
        )
    except Exception as exc:
        logger.error("Claude API connection failed: %s", exc)
        return False

    logger.info("Claude API connection successful")
    return True


# ---------------------------------------------------------------------------
# Node function
# ---------------------------------------------------------------------------


def generator_node(state: QuizState) -> dict[str, Any]:
    """Generate the quiz from state["text"]; errors propagate out of the graph."""
    started_at = time.time()
    logs: list[dict] = list(state.get("logs") or [])
    pipeline_trace: list[dict] = list(state.get("pipeline_trace") or [])

    ts = lambda: int(time.time() * 1000)  # noqa: E731

    text = state.get("text", "")
    number_of_questions = state.get("number_of_questions") or get_settings().default_question_count
    logs.append({
        "agent": "generator",
        "msg": f"Generating {number_of_questions} questions from {len(text)} characters...",
        "ts": ts(),
    })

    quiz = generate_quiz_from_text(text, number_of_questions)

    duration_ms = int((time.time() - started_at) * 1000)
    pipeline_trace.append({"agent": "generator", "started_at": started_at, "ms": duration_ms})
    logs.append({"agent": "generator", "msg": f"Generated {len(quiz)} questions in {duration_ms}ms", "ts": ts()})

    return {
        "quiz": quiz,
        "logs": logs,
        "pipeline_trace": pipeline_trace,
    }
