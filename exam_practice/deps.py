"""Shared FastAPI dependencies for storage, upstream clients and caller identity."""

import logging
from typing import Iterator, Optional

import httpx
from fastapi import Depends, Header, HTTPException
from sqlmodel import Session

from exam_practice import errors
from exam_practice.config import Settings, get_settings
from exam_practice.database import get_session
from exam_practice.repositories import SqlTestRepository, SupabaseTestRepository, TestRepository
from exam_practice.services.answer_validator import AnswerValidator

logger = logging.getLogger(__name__)


def get_http_client() -> Iterator[httpx.Client]:
    """Outbound HTTP client for the hosted backend and the LLM gateway."""
    with httpx.Client() as client:
        yield client


def get_test_store(session: Session = Depends(get_session)) -> SqlTestRepository:
    """The local store used by the authoring endpoints."""
    return SqlTestRepository(session)


def get_privileged_test_repository(
    session: Session = Depends(get_session),
    settings: Settings = Depends(get_settings),
    http_client: httpx.Client = Depends(get_http_client),
) -> TestRepository:
    """Repository handle allowed to read correct answers.

    Only grading and answer-stripping services receive this handle.
    """
    if settings.TEST_REPOSITORY_BACKEND == "supabase":
        if not settings.SUPABASE_URL or not settings.SUPABASE_SERVICE_ROLE_KEY:
            logger.error("Supabase test repository selected but SUPABASE_URL/SERVICE_ROLE_KEY unset")
            raise errors.UpstreamFailure("Test repository is not configured")
        return SupabaseTestRepository(
            settings.SUPABASE_URL,
            settings.SUPABASE_SERVICE_ROLE_KEY,
            timeout=settings.UPSTREAM_TIMEOUT_SECONDS,
            client=http_client,
        )
    return SqlTestRepository(session)


def get_answer_validator(
    repository: TestRepository = Depends(get_privileged_test_repository),
) -> AnswerValidator:
    return AnswerValidator(repository)


def get_current_user_id(x_user_id: Optional[str] = Header(None)) -> Optional[str]:
    """Return the authenticated learner id forwarded by the auth layer, if any."""
    if x_user_id is None:
        return None
    return x_user_id.strip() or None


def require_user_id(user_id: Optional[str] = Depends(get_current_user_id)) -> str:
    """Ensure a learner identity is present; otherwise respond 401."""
    if user_id is None:
        raise HTTPException(status_code=401, detail="Authentication required")
    return user_id
