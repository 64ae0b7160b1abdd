# streamlit_app/api.py
import json
from typing import Any, Dict, List

import requests

from quizgen.services.normalizer import strip_code_fences
from quizgen.utils.config import settings

REQUEST_TIMEOUT_SECONDS = 180

class QuizAPIError(Exception):
    """Raised when the backend answers with an error status or an unexpected shape."""

def _post(path: str, payload: dict, base_url: str | None = None) -> dict:
    url = f"{(base_url or settings.quiz_api_base_url).rstrip('/')}/{path}"
    try:
        response = requests.post(url, json=payload, timeout=REQUEST_TIMEOUT_SECONDS)
    except requests.RequestException as e:
        raise QuizAPIError(f"Could not reach the quiz API: {e}") from e

    try:
        data = response.json()
    except ValueError:
        data = {}
    if not response.ok:
        raise QuizAPIError(data.get("error") or f"Request failed with status {response.status_code}.")
    return data

def generate_quiz(topic: str, fmt: str, count: int, base_url: str | None = None) -> dict:
    """Requests a new quiz and returns only the payload that matches the requested format."""
    data = _post("generate", {"text": topic, "format": fmt, "count": count}, base_url)
    if fmt == "json" and data.get("generatedMCQs") is not None:
        return {"generatedMCQs": data["generatedMCQs"]}
    if fmt == "html" and data.get("generatedMCQsHTML"):
        return {"generatedMCQsHTML": data["generatedMCQsHTML"]}
    raise QuizAPIError("Unexpected response format from API.")

def _as_text(value: Any) -> str:
    return "" if value is None else str(value)

def usable_questions(items: Any) -> List[dict]:
    """Keeps the entries that look like question objects; the model occasionally returns bare strings."""
    if not isinstance(items, list):
        return []
    return [item for item in items if isinstance(item, dict)]

def build_answers(questions: List[dict], selections: Dict[int, Any]) -> List[dict]:
    """Pairs each question with the learner's choice. Unanswered questions count as an empty answer.

    Options may be numbers; both sides are sent as text so they compare equal on the server.
    """
    return [
        {
            "question": _as_text(q.get("question")),
            "userAnswer": _as_text(selections.get(index)),
            "correctAnswer": _as_text(q.get("answer")),
        }
        for index, q in enumerate(questions)
    ]

def evaluate_quiz(topic: str, answers: List[dict], fmt: str, base_url: str | None = None) -> dict:
    data = _post("evaluate", {"topic": topic, "answers": answers, "format": fmt}, base_url)
    data["newQuestions"] = coerce_new_questions(data.get("newQuestions"), fmt)
    return data

def coerce_new_questions(new_questions: Any, fmt: str) -> Any:
    # JSON remedial questions occasionally arrive as a fenced string; parse them if possible.
    if fmt == "json" and isinstance(new_questions, str):
        try:
            return json.loads(strip_code_fences(new_questions))
        except ValueError:
            return new_questions
    return new_questions
