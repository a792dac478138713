"""Test authoring, learner test view, and test-taking session routes."""

from typing import List, Optional

from fastapi import APIRouter, Body, Depends, Query
from fastapi import status as http_status
from sqlmodel import Session

from exam_practice.config import Settings, get_settings
from exam_practice.database import get_session
from exam_practice.deps import (
    get_current_user_id,
    get_privileged_test_repository,
    get_test_store,
    require_user_id,
)
from exam_practice.repositories import SqlTestRepository, TestRepository
from exam_practice.schemas import PracticeTestIn, PracticeTestSummary, PublicTest, SessionOut
from exam_practice.services import test_service

router = APIRouter()


@router.post("", response_model=PracticeTestSummary, status_code=http_status.HTTP_201_CREATED)
def create_test(
    payload: PracticeTestIn = Body(...),
    store: SqlTestRepository = Depends(get_test_store),
    user_id: Optional[str] = Depends(get_current_user_id),
):
    test = test_service.create_test(store, payload, created_by=user_id)
    return test_service.summarize(test)


@router.get("", response_model=List[PracticeTestSummary])
def list_tests(
    category: Optional[str] = Query(None),
    store: SqlTestRepository = Depends(get_test_store),
):
    return test_service.list_tests(store, category)


@router.get("/{test_id}", response_model=PublicTest)
def get_test(
    test_id: str,
    repository: TestRepository = Depends(get_privileged_test_repository),
):
    """Learner view of a test: correct answers and explanations are removed."""
    return test_service.get_learner_view(repository, test_id)


@router.put("/{test_id}", response_model=PracticeTestSummary)
def update_test(
    test_id: str,
    payload: PracticeTestIn = Body(...),
    store: SqlTestRepository = Depends(get_test_store),
):
    test = test_service.update_test(store, test_id, payload)
    return test_service.summarize(test)


@router.delete("/{test_id}")
def delete_test(test_id: str, store: SqlTestRepository = Depends(get_test_store)):
    test_service.delete_test(store, test_id)
    return {"deleted": test_id}


@router.post(
    "/{test_id}/sessions", response_model=SessionOut, status_code=http_status.HTTP_201_CREATED
)
def start_session(
    test_id: str,
    session: Session = Depends(get_session),
    repository: TestRepository = Depends(get_privileged_test_repository),
    settings: Settings = Depends(get_settings),
    user_id: str = Depends(require_user_id),
):
    """Open a test-taking session, or resume the learner's open one."""
    return test_service.start_session(
        session, repository, user_id, test_id, grace_minutes=settings.TEST_SESSION_GRACE_MINUTES
    )


@router.post("/{test_id}/sessions/complete")
def complete_session(
    test_id: str,
    session: Session = Depends(get_session),
    user_id: str = Depends(require_user_id),
):
    completed = test_service.complete_session(session, user_id, test_id)
    return {"completed": completed}
