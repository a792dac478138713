"""SQLModel tables for the exam practice service."""

from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import JSON, Column
from sqlmodel import Field, SQLModel


def utcnow() -> datetime:
    """Current time in UTC, timezone-aware."""
    return datetime.now(timezone.utc)


class PracticeTest(SQLModel, table=True):
    """A practice test definition, including the authoritative answers.

    Questions are stored either as a flat ``questions`` list or grouped
    into ``parts``; both hold the camelCase JSON shape served by the API.
    """

    id: str = Field(primary_key=True, max_length=100)
    title: str
    description: str = ""
    category: str
    difficulty: str = Field(default="Intermediate")
    duration: int  # minutes
    questions: List[dict] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    parts: Optional[List[dict]] = Field(default=None, sa_column=Column(JSON, nullable=True))
    audio_file_path: Optional[str] = None
    created_by: Optional[str] = None
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class PracticeSession(SQLModel, table=True):
    """A learner's window for taking a test."""

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: str = Field(index=True)
    test_id: str = Field(index=True)
    started_at: datetime = Field(default_factory=utcnow)
    expires_at: datetime
    completed: bool = Field(default=False)
    created_at: datetime = Field(default_factory=utcnow)


class PracticeResult(SQLModel, table=True):
    """A graded submission, scored server-side at save time."""

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: str = Field(index=True)
    test_id: str
    test_title: str
    test_category: str
    score: int
    total_questions: int
    percentage: float
    answers: dict = Field(default_factory=dict, sa_column=Column(JSON, nullable=False))
    ai_analysis: Optional[str] = None
    completed_at: datetime = Field(default_factory=utcnow)
