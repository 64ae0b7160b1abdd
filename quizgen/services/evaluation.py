# Scores submitted answers and, for a weak topic, asks the model for remedial questions
# quizgen/services/evaluation.py
from typing import Any, Iterable, List

from pydantic import ValidationError

from quizgen.models.quiz import AnswerRecord, EvaluationRequest, EvaluationResult
from quizgen.services import llm_client
from quizgen.services.prompt_library import build_remediation_prompt
from quizgen.services.quiz_generation import QuizGenerator, coerce_count, parse_format, quiz_generator
from quizgen.utils.config import settings
from quizgen.utils.errors import InvalidInput, RemediationGenerationError
from quizgen.utils.logger import logger

# A topic is weak when more than this many answers are wrong, regardless of how many were submitted.
WEAK_TOPIC_THRESHOLD = 2

def count_wrong_answers(answers: Iterable[AnswerRecord]) -> int:
    return sum(1 for answer in answers if answer.is_wrong())

def is_weak(wrong_count: int) -> bool:
    return wrong_count > WEAK_TOPIC_THRESHOLD

def parse_answers(answers: Any) -> List[AnswerRecord]:
    if answers is None or not isinstance(answers, list):
        raise InvalidInput('Please provide "topic" and "answers" array.')
    records = []
    for index, entry in enumerate(answers):
        try:
            records.append(AnswerRecord.model_validate(entry))
        except ValidationError:
            raise InvalidInput(f"Answer #{index + 1} is not a valid answer record.")
    return records

class EvaluationService:
    def __init__(self, generator: QuizGenerator | None = None):
        self._generator = generator

    @property
    def generator(self) -> QuizGenerator:
        return self._generator or quiz_generator

    def validate(
        self,
        topic: Any,
        answers: Any,
        fmt: Any = None,
        difficulty: Any = None,
        count: Any = None,
    ) -> EvaluationRequest:
        llm_client.ensure_credentials()
        if not isinstance(topic, str) or not topic.strip():
            raise InvalidInput('Please provide "topic" and "answers" array.')
        records = parse_answers(answers)
        output_format = parse_format(fmt)
        if difficulty is not None and not isinstance(difficulty, str):
            raise InvalidInput("difficulty must be a string.")
        return EvaluationRequest(
            topic=topic,
            answers=records,
            format=output_format,
            difficulty=difficulty or settings.default_difficulty,
            count=coerce_count(count, settings.remedial_question_count),
        )

    async def evaluate(
        self,
        topic: Any,
        answers: Any,
        fmt: Any = None,
        difficulty: Any = None,
        count: Any = None,
    ) -> EvaluationResult:
        request = self.validate(topic, answers, fmt, difficulty, count)

        wrong_count = count_wrong_answers(request.answers)
        weak = is_weak(wrong_count)
        logger.info(
            f"Evaluated {len(request.answers)} answers on '{request.topic}': "
            f"{wrong_count} wrong, weak={weak}"
        )

        remedial_questions = None
        if weak:
            prompt = build_remediation_prompt(
                request.topic, request.count, request.format, request.difficulty
            )
            try:
                remedial_questions = await self.generator.run_prompt(prompt, request.format)
            except Exception as e:
                logger.error(f"Could not generate follow-up questions for '{request.topic}': {e}")
                raise RemediationGenerationError("Could not generate follow-up questions.") from e

        return EvaluationResult(
            topic=request.topic,
            weak=weak,
            wrong_count=wrong_count,
            remedial_questions=remedial_questions,
        )

# Instantiate the service globally
evaluation_service = EvaluationService()
