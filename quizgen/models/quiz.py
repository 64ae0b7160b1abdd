# Data models for generated questions, answer records and pipeline results
# quizgen/models/quiz.py
from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from typing import Any, List, Optional

from quizgen.models.enums import OutputFormat

class Question(BaseModel):
    """One multiple-choice question as the model is asked to produce it.

    `answer` is expected to be one of `options`; that is trusted, not enforced.
    """
    model_config = ConfigDict(extra="allow", coerce_numbers_to_str=True)

    question: str
    options: List[str]
    answer: str
    explanation: Optional[str] = None

    def answer_in_options(self) -> bool:
        return self.answer in self.options

class AnswerRecord(BaseModel):
    # Models sometimes use numeric options; answers are compared as text.
    model_config = ConfigDict(frozen=True, populate_by_name=True, coerce_numbers_to_str=True)

    question_text: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("questionText", "question", "question_text")
    )
    user_answer: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("userAnswer", "user_answer")
    )
    correct_answer: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("correctAnswer", "correct_answer")
    )

    def is_wrong(self) -> bool:
        # Exact, case-sensitive comparison
        return self.user_answer != self.correct_answer

class GenerationRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    topic: str = Field(min_length=1)
    format: OutputFormat = OutputFormat.JSON
    count: int = Field(default=10, gt=0)

class EvaluationRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    topic: str = Field(min_length=1)
    answers: List[AnswerRecord]
    format: OutputFormat = OutputFormat.JSON
    difficulty: str = "medium"
    count: int = Field(default=5, gt=0)

class GenerationResult(BaseModel):
    """Tagged result of a generation: `questions` for JSON, `html` for HTML. Never both."""
    model_config = ConfigDict(frozen=True)

    format: OutputFormat
    questions: Any = None
    html: Optional[str] = None

    @classmethod
    def from_questions(cls, questions: Any) -> "GenerationResult":
        return cls(format=OutputFormat.JSON, questions=questions)

    @classmethod
    def from_html(cls, html: str) -> "GenerationResult":
        return cls(format=OutputFormat.HTML, html=html)

    def wire_value(self) -> Any:
        if self.format is OutputFormat.HTML:
            return self.html
        return self.questions

    def to_payload(self) -> dict:
        if self.format is OutputFormat.HTML:
            return {"generatedMCQsHTML": self.html}
        return {"generatedMCQs": self.questions}

class EvaluationResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    topic: str
    weak: bool
    wrong_count: int = Field(ge=0)
    remedial_questions: Optional[GenerationResult] = None

    def to_payload(self) -> dict:
        return {
            "topic": self.topic,
            "weak": self.weak,
            "wrongAnswers": self.wrong_count,
            "newQuestions": self.remedial_questions.wire_value() if self.remedial_questions else None,
        }
