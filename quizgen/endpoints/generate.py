# Endpoint that turns a topic into multiple-choice questions via the model
# quizgen/endpoints/generate.py
from typing import Any

from fastapi import APIRouter, Body
from pydantic import BaseModel

from quizgen.services.quiz_generation import quiz_generator
from quizgen.utils.logger import logger

router = APIRouter()

class GenerateRequest(BaseModel):
    # Loosely typed: the pipeline validates these after checking the credential.
    text: Any = None
    format: Any = None
    count: Any = None

    @classmethod
    def from_body(cls, body: Any) -> "GenerateRequest":
        """Reads the fields from a JSON body. A body that is not an object has none of them."""
        return cls.model_validate(body) if isinstance(body, dict) else cls()

@router.post("/generate")
async def generate_mcqs(body: Any = Body(default=None)):
    request = GenerateRequest.from_body(body)
    logger.info(f"Incoming generate request: text={request.text!r}, format={request.format!r}, count={request.count!r}")

    result = await quiz_generator.generate(request.text, request.format, request.count)
    return result.to_payload()
