# Streaming client for the external text model; the provider is chosen via settings
# quizgen/services/llm_client.py
from typing import Any, AsyncIterator
import threading

from langchain_google_genai import ChatGoogleGenerativeAI
from langchain_openai import ChatOpenAI

from quizgen.models.enums import LLMProvider
from quizgen.utils.config import settings
from quizgen.utils.errors import ConfigurationError
from quizgen.utils.logger import logger

# --- Initialized lazily, shared by every request ---
_model_client = None
_init_lock = threading.Lock()

def chunk_text(chunk: Any) -> str:
    """Extracts the text of one streamed message chunk.

    Gemini may deliver content as a list of parts instead of a plain string;
    only the text parts are kept.
    """
    content = getattr(chunk, "content", chunk)
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        texts = []
        for part in content:
            if isinstance(part, str):
                texts.append(part)
            elif isinstance(part, dict) and part.get("type", "text") == "text":
                texts.append(str(part.get("text", "")))
        return "".join(texts)
    return ""

class ModelClient:
    """Wraps a LangChain chat model and exposes its output as a stream of text fragments."""

    def __init__(self, chat_model):
        self._chat_model = chat_model

    async def stream_text(self, prompt: str) -> AsyncIterator[str]:
        async for chunk in self._chat_model.astream(prompt):
            text = chunk_text(chunk)
            if text:
                yield text

def ensure_credentials() -> None:
    """Fails the current request if the configured provider cannot be used."""
    provider = settings.llm_provider
    if provider not in {p.value for p in LLMProvider}:
        raise ConfigurationError(f"Server config error: unsupported LLM_PROVIDER '{provider}'")
    if not settings.provider_api_key():
        logger.error(f"API key for provider '{provider}' is not set in environment")
        raise ConfigurationError("Server config error: missing API key")

def _build_chat_model():
    provider = settings.llm_provider
    api_key = settings.provider_api_key()
    if provider == LLMProvider.GOOGLE.value:
        return ChatGoogleGenerativeAI(
            google_api_key=api_key,
            model=settings.google_model_name,
            response_mime_type="text/plain",
        )
    if provider == LLMProvider.OPENAI.value:
        return ChatOpenAI(openai_api_key=api_key, model_name=settings.openai_model_name)
    raise ConfigurationError(f"Server config error: unsupported LLM_PROVIDER '{provider}'")

def get_model_client() -> ModelClient:
    """Returns the shared model client, building it on first use."""
    global _model_client

    with _init_lock:
        if _model_client is None:
            ensure_credentials()
            logger.info(f"Initializing LLM client for provider: {settings.llm_provider}")
            try:
                _model_client = ModelClient(_build_chat_model())
            except ConfigurationError:
                raise
            except Exception as e:
                logger.exception(f"Failed to initialize LLM client: {e}")
                raise ConfigurationError("Server config error: could not initialize the model client") from e
            logger.info(f"Initialized LLM with provider {settings.llm_provider}")
        return _model_client

def reset_model_client() -> None:
    """Drops the cached client so the next request rebuilds it from current settings."""
    global _model_client

    with _init_lock:
        _model_client = None
