# quizgen/utils/config.py
import os
from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings
from dotenv import load_dotenv

# Load .env file before defining settings
load_dotenv()

class Settings(BaseSettings):
    # --- LLM Provider Configuration ---
    llm_provider: str = os.getenv("LLM_PROVIDER", "google")

    # Google Gemini specific (GEMINI_API_KEY wins over GOOGLE_API_KEY when both are set)
    google_api_key: str | None = Field(
        default=None, validation_alias=AliasChoices("GEMINI_API_KEY", "GOOGLE_API_KEY")
    )
    google_model_name: str = os.getenv("GOOGLE_MODEL_NAME", "gemini-2.5-pro")

    # OpenAI specific
    openai_api_key: str | None = os.getenv("OPENAI_API_KEY")
    openai_model_name: str = os.getenv("OPENAI_MODEL_NAME", "gpt-4o-mini")

    # Upper bound on a full model stream, in seconds. Expiry is reported as an upstream failure.
    llm_stream_timeout_seconds: float = 120.0

    # Quiz defaults
    default_question_count: int = 10
    remedial_question_count: int = 5
    default_difficulty: str = "medium"

    # Server
    host: str = "0.0.0.0"
    port: int = 3000
    # Comma separated list of origins allowed by CORS
    cors_allow_origins: str = "*"
    log_level: str = "INFO"

    # Streamlit frontend
    quiz_api_base_url: str = "http://localhost:3000/api"

    @field_validator("llm_provider")
    @classmethod
    def _lower_provider(cls, value: str) -> str:
        return value.strip().lower()

    @field_validator("log_level")
    @classmethod
    def _upper_log_level(cls, value: str) -> str:
        return value.strip().upper()

    def provider_api_key(self) -> str | None:
        """Returns the credential for the configured provider, or None if it is not set."""
        if self.llm_provider == "openai":
            return self.openai_api_key
        return self.google_api_key

    def cors_origins(self) -> list[str]:
        return [origin.strip() for origin in self.cors_allow_origins.split(",") if origin.strip()]

    class Config:
        env_file = '.env'
        env_file_encoding = 'utf-8'
        extra = 'ignore'

settings = Settings()
