"""Request/response schemas.

The wire format is camelCase JSON (``correctAnswer``, ``totalQuestions``);
attributes are snake_case and mapped with an alias generator.
"""

from datetime import datetime
from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

QuestionType = Literal["multiple-choice", "fill-blank", "true-false"]
Difficulty = Literal["Beginner", "Intermediate", "Advanced"]

# A learner's answer: option text, free text, a legacy option index, or nothing
AnswerValue = Union[int, float, str, None]
# Index into options (legacy encoding) or the literal answer text
CorrectAnswer = Union[int, float, str]


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# --- Test definitions ---


class Question(CamelModel):
    """A question as stored, including its authoritative answer."""

    model_config = ConfigDict(extra="ignore")

    id: str = Field(min_length=1)
    type: QuestionType
    question: str = ""
    options: Optional[List[str]] = None
    correct_answer: CorrectAnswer
    explanation: str = ""

    @field_validator("correct_answer", mode="before")
    @classmethod
    def _boolean_answer_as_text(cls, value: Any) -> Any:
        # True/false answers are sometimes stored as JSON booleans
        if isinstance(value, bool):
            return "true" if value else "false"
        return value

    @field_validator("question", "explanation", mode="before")
    @classmethod
    def _null_as_empty(cls, value: Any) -> Any:
        return "" if value is None else value


class Part(CamelModel):
    """A named group of questions sharing context such as a reading passage."""

    model_config = ConfigDict(extra="ignore")

    id: str = ""
    title: str = ""
    context: Optional[str] = None
    questions: List[Question] = Field(default_factory=list)


class PracticeTestIn(CamelModel):
    """Authoring payload for creating or replacing a test."""

    id: str = Field(min_length=1, max_length=100)
    title: str = Field(min_length=1, max_length=200)
    description: str = ""
    category: str = Field(min_length=1, max_length=50)
    difficulty: Difficulty = "Intermediate"
    duration: int = Field(ge=1, le=600)
    questions: Optional[List[Question]] = None
    parts: Optional[List[Part]] = None
    audio_file_path: Optional[str] = None


class PracticeTestSummary(CamelModel):
    id: str
    title: str
    description: str
    category: str
    difficulty: str
    duration: int
    question_count: int


# --- Learner view (answers removed) ---


class PublicQuestion(CamelModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    type: QuestionType
    question: str = ""
    options: Optional[List[str]] = None


class PublicPart(CamelModel):
    model_config = ConfigDict(extra="ignore")

    id: str = ""
    title: str = ""
    context: Optional[str] = None
    questions: List[PublicQuestion] = Field(default_factory=list)


class PublicTest(CamelModel):
    id: str
    title: str
    description: str = ""
    category: str
    difficulty: str
    duration: int
    questions: List[PublicQuestion] = Field(default_factory=list)
    parts: Optional[List[PublicPart]] = None
    audio_file_path: Optional[str] = None


# --- Grading ---


class SubmissionIn(CamelModel):
    """Caller-supplied submission.

    Fields are deliberately loose; the answer validator checks their shape
    so malformed input is reported as a 400 with a specific message.
    """

    test_id: Any = None
    user_answers: Any = None


class ResultIn(SubmissionIn):
    ai_analysis: Optional[str] = None


class QuestionResult(CamelModel):
    question_id: str
    question: str
    user_answer: AnswerValue = None
    correct_answer: CorrectAnswer
    explanation: str
    is_correct: bool


class ScoreReport(CamelModel):
    score: int
    total_questions: int
    percentage: float
    results: List[QuestionResult]


class AnalysisOut(CamelModel):
    analysis: str
    score: int
    total_questions: int
    percentage: float


# --- Sessions and stored results ---


class SessionOut(CamelModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    test_id: str
    started_at: datetime
    expires_at: datetime
    completed: bool


class ResultOut(CamelModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    test_id: str
    test_title: str
    test_category: str
    score: int
    total_questions: int
    percentage: float
    answers: Dict[str, Any]
    ai_analysis: Optional[str] = None
    completed_at: datetime
