"""
Prompt text for quiz generation.

The output contract (JSON array of {question, options A–D, correct_answer})
lives here; agents/generator.py validates the model's reply against it.
"""

# ---------------------------------------------------------------------------
# System prompt
# ---------------------------------------------------------------------------

SYSTEM_PROMPT_QUIZ = """You are an experienced teacher who writes multiple-choice quizzes
from study material. You only ever answer with raw JSON — never markdown, never prose."""


# ---------------------------------------------------------------------------
# User prompt
# ---------------------------------------------------------------------------

QUIZ_JSON_EXAMPLE = """[
  {
    "question": "Your question here?",
    "options": {
      "A": "First option",
      "B": "Second option",
      "C": "Third option",
      "D": "Fourth option"
    },
    "correct_answer": "A"
  }
]"""

_QUIZ_PROMPT_TEMPLATE = """
Create exactly {n} multiple choice questions based on the following text.
Each question must have exactly 4 options (A, B, C, D) with only one correct answer.

Text to analyze: "{text}"

IMPORTANT: Return ONLY a valid JSON array with NO additional text, markdown, or explanations.

Required JSON format:
{example}

Rules:
- Questions must be clear and specific to the provided text
- All 4 options must be plausible but only one correct
- correct_answer must be exactly "A", "B", "C", or "D"
- Return valid JSON only, no markdown code blocks
- Generate exactly {n} questions
"""


def build_quiz_prompt(text: str, number_of_questions: int) -> str:
    """Fill the quiz prompt for ``number_of_questions`` questions about ``text``."""
    return _QUIZ_PROMPT_TEMPLATE.format(
        n=number_of_questions,
        text=text,
        example=QUIZ_JSON_EXAMPLE,
    )
