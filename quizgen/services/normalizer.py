# Turns the model's raw text into a GenerationResult
# quizgen/services/normalizer.py
import json
import re
from typing import Any

from pydantic import ValidationError

from quizgen.models.enums import OutputFormat
from quizgen.models.quiz import GenerationResult, Question
from quizgen.utils.errors import InvalidInput, MalformedModelOutput
from quizgen.utils.logger import logger

# ```json ... ``` (label optional). Non-greedy so several fenced blocks each lose their markers.
_CODE_FENCE_RE = re.compile(r"```(?:json)?\s*([\s\S]*?)```", re.IGNORECASE)

def strip_code_fences(text: str) -> str:
    """Removes Markdown code-fence markers and surrounding whitespace. Fence-free text is only trimmed."""
    return _CODE_FENCE_RE.sub(r"\1", text).strip()

def parse_json_output(raw: str) -> Any:
    cleaned = strip_code_fences(raw)
    try:
        return json.loads(cleaned)
    except json.JSONDecodeError as e:
        logger.warning(f"Model output is not valid JSON ({e}); returning raw text to caller.")
        logger.debug(f"Unparseable model output:\n{raw}")
        raise MalformedModelOutput(
            "Failed to parse JSON from the model response.", raw_text=raw
        ) from e

def report_data_quality(questions: Any) -> int:
    """Logs questions that do not match the expected shape. Returns how many were flagged."""
    if not isinstance(questions, list):
        logger.warning(f"Expected a JSON array of questions, got {type(questions).__name__}.")
        return 1

    flagged = 0
    for index, entry in enumerate(questions):
        try:
            question = Question.model_validate(entry)
        except ValidationError:
            logger.warning(f"Question #{index + 1} does not have the expected question/options/answer shape.")
            flagged += 1
            continue
        if len(question.options) != 4:
            logger.warning(f"Question #{index + 1} has {len(question.options)} options instead of 4.")
            flagged += 1
        elif not question.answer_in_options():
            logger.warning(f"Question #{index + 1} answer '{question.answer}' is not one of its options.")
            flagged += 1
    return flagged

def normalize(raw: str, fmt: OutputFormat | str) -> GenerationResult:
    try:
        fmt = OutputFormat(fmt)
    except ValueError:
        raise InvalidInput(f'Invalid format "{fmt}". Use "json" or "html".')

    if fmt is OutputFormat.HTML:
        return GenerationResult.from_html(raw)

    questions = parse_json_output(raw)
    report_data_quality(questions)
    return GenerationResult.from_questions(questions)
