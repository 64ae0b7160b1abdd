# Endpoint that scores submitted answers and returns remedial questions for a weak topic
# quizgen/endpoints/evaluate.py
from typing import Any

from fastapi import APIRouter, Body
from pydantic import BaseModel

from quizgen.services.evaluation import evaluation_service
from quizgen.utils.logger import logger

router = APIRouter()

class EvaluateRequest(BaseModel):
    topic: Any = None
    answers: Any = None
    format: Any = None
    difficulty: Any = None
    count: Any = None

    @classmethod
    def from_body(cls, body: Any) -> "EvaluateRequest":
        return cls.model_validate(body) if isinstance(body, dict) else cls()

class EvaluateResponse(BaseModel):
    topic: str
    weak: bool
    wrongAnswers: int
    newQuestions: Any = None

@router.post("/evaluate", response_model=EvaluateResponse)
async def evaluate_answers(body: Any = Body(default=None)):
    request = EvaluateRequest.from_body(body)
    answer_count = len(request.answers) if isinstance(request.answers, list) else None
    logger.info(f"Incoming evaluate request: topic={request.topic!r}, answers={answer_count}, format={request.format!r}")

    result = await evaluation_service.evaluate(
        request.topic,
        request.answers,
        fmt=request.format,
        difficulty=request.difficulty,
        count=request.count,
    )
    return EvaluateResponse(**result.to_payload())
