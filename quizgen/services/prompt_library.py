# quizgen/services/prompt_library.py
from langchain_core.prompts import PromptTemplate

from quizgen.models.enums import OutputFormat
from quizgen.utils.errors import InvalidInput

PROMPT_LIBRARY = {
    "generate": {
        OutputFormat.HTML: PromptTemplate.from_template(
            """Generate {count} multiple choice questions (MCQs) on the following topic. Output the MCQs as valid HTML with each question and its options in <ul> lists:

Topic: {topic}

Format Example:
<div>
  <p>1. What is ...?</p>
  <ul>
    <li>A) Option 1</li>
    <li>B) Option 2</li>
    <li>C) Option 3</li>
    <li>D) Option 4</li>
  </ul>
</div>"""
        ),
        OutputFormat.JSON: PromptTemplate.from_template(
            """Generate {count} multiple choice questions (MCQs) on the following topic. Output the MCQs as a JSON array with this structure:

[
  {{
    "question": "Question text?",
    "options": ["Option 1", "Option 2", "Option 3", "Option 4"],
    "answer": "Correct Option"
  }}
]

Topic: {topic}"""
        ),
    },
    "remediate": {
        OutputFormat.HTML: PromptTemplate.from_template(
            """The student is weak in "{topic}". Generate {count} {difficulty}-level MCQs in HTML.
Use <p> for question, <ul> for options, and <p> for explanation. No extra text."""
        ),
        OutputFormat.JSON: PromptTemplate.from_template(
            """The student is weak in "{topic}". Generate {count} {difficulty}-level MCQs with the following format:

{{
  "question": "The question",
  "options": ["A", "B", "C", "D"],
  "answer": "Correct option",
  "explanation": "Why the answer is correct"
}}

Only return a clean JSON array. No markdown, no wrapping."""
        ),
    },
}

def _template(purpose: str, fmt: OutputFormat | str) -> PromptTemplate:
    try:
        fmt = OutputFormat(fmt)
    except ValueError:
        raise InvalidInput(f'Invalid format "{fmt}". Use "json" or "html".')
    return PROMPT_LIBRARY[purpose][fmt]

def build_generation_prompt(topic: str, count: int, fmt: OutputFormat | str) -> str:
    return _template("generate", fmt).format(topic=topic, count=count)

def build_remediation_prompt(topic: str, count: int, fmt: OutputFormat | str, difficulty: str) -> str:
    return _template("remediate", fmt).format(topic=topic, count=count, difficulty=difficulty)
