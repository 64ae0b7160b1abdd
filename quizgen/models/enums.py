# quizgen/models/enums.py
from enum import Enum

class OutputFormat(str, Enum):
    """Shape of the questions returned by the model: structured JSON or a single HTML string."""
    HTML = "html"
    JSON = "json"

class LLMProvider(str, Enum):
    """Model providers the client knows how to build."""
    GOOGLE = "google"
    OPENAI = "openai"
