# Quiz generation pipeline: validate -> build prompt -> stream from the model -> normalize
# quizgen/services/quiz_generation.py
import asyncio
from typing import Any, Callable

from quizgen.models.enums import OutputFormat
from quizgen.models.quiz import GenerationRequest, GenerationResult
from quizgen.services import llm_client
from quizgen.services.normalizer import normalize
from quizgen.services.prompt_library import build_generation_prompt
from quizgen.utils.config import settings
from quizgen.utils.errors import InvalidInput, QuizGenError, UpstreamError
from quizgen.utils.logger import logger

def coerce_count(value: Any, default: int) -> int:
    """Reads a question count from a request field.

    Integers and numeric strings are accepted. Anything missing, unparseable or
    not positive falls back to `default`.
    """
    if value is None or isinstance(value, bool):
        return default
    try:
        count = int(value)
    except (TypeError, ValueError, OverflowError):
        return default
    return count if count > 0 else default

def parse_format(value: Any) -> OutputFormat:
    if value is None or value == "":
        return OutputFormat.JSON
    try:
        return OutputFormat(value)
    except (TypeError, ValueError):
        raise InvalidInput('Invalid format. Use "json" or "html".')

class QuizGenerator:
    def __init__(self, client_factory: Callable[[], llm_client.ModelClient] | None = None):
        self._client_factory = client_factory

    def _client(self) -> llm_client.ModelClient:
        if self._client_factory is not None:
            return self._client_factory()
        return llm_client.get_model_client()

    def validate(self, topic: Any, fmt: Any = None, count: Any = None) -> GenerationRequest:
        """Checks a generation request. The first failure wins: credential, topic, then format."""
        llm_client.ensure_credentials()
        if not isinstance(topic, str) or not topic.strip():
            raise InvalidInput('Please provide a "text" field in the JSON body.')
        output_format = parse_format(fmt)
        return GenerationRequest(
            topic=topic,
            format=output_format,
            count=coerce_count(count, settings.default_question_count),
        )

    async def generate(self, topic: Any, fmt: Any = None, count: Any = None) -> GenerationResult:
        request = self.validate(topic, fmt, count)
        prompt = build_generation_prompt(request.topic, request.count, request.format)
        logger.info(
            f"Generating {request.count} {request.format.value} MCQs on topic '{request.topic}' "
            f"(prompt length {len(prompt)})"
        )
        return await self.run_prompt(prompt, request.format)

    async def run_prompt(self, prompt: str, fmt: OutputFormat) -> GenerationResult:
        """Sends one prompt upstream, reads the whole stream and normalizes the combined text."""
        client = self._client()
        try:
            raw_text = await asyncio.wait_for(
                self._collect(client, prompt), timeout=settings.llm_stream_timeout_seconds
            )
        except asyncio.TimeoutError as e:
            logger.error(f"Model stream did not complete within {settings.llm_stream_timeout_seconds}s")
            raise UpstreamError("The model did not respond in time.") from e
        except QuizGenError:
            raise
        except Exception as e:
            logger.exception(f"Error generating content: {e}")
            raise UpstreamError("An error occurred while generating content.") from e

        logger.debug(f"Model returned {len(raw_text)} characters")
        return normalize(raw_text, fmt)

    @staticmethod
    async def _collect(client: llm_client.ModelClient, prompt: str) -> str:
        # Fragments are concatenated in arrival order; nothing is normalized before the stream ends.
        fragments = []
        async for text in client.stream_text(prompt):
            if text:
                fragments.append(text)
        return "".join(fragments)

# Instantiate the service globally
quiz_generator = QuizGenerator()
