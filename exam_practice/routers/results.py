"""Stored results of graded tests."""

from typing import List

from fastapi import APIRouter, Body, Depends
from fastapi import status as http_status
from sqlmodel import Session

from exam_practice.database import get_session
from exam_practice.deps import get_answer_validator, require_user_id
from exam_practice.schemas import ResultIn, ResultOut
from exam_practice.services import result_service
from exam_practice.services.answer_validator import AnswerValidator

router = APIRouter()


@router.post("", response_model=ResultOut, status_code=http_status.HTTP_201_CREATED)
def save_result(
    payload: ResultIn = Body(...),
    session: Session = Depends(get_session),
    validator: AnswerValidator = Depends(get_answer_validator),
    user_id: str = Depends(require_user_id),
):
    """Re-grade the submission and store it in the learner's history."""
    return result_service.save_result(
        session,
        validator,
        user_id,
        payload.test_id,
        payload.user_answers,
        ai_analysis=payload.ai_analysis,
    )


@router.get("", response_model=List[ResultOut])
def list_results(
    session: Session = Depends(get_session),
    user_id: str = Depends(require_user_id),
):
    return result_service.list_results(session, user_id)


@router.get("/{result_id}", response_model=ResultOut)
def get_result(
    result_id: int,
    session: Session = Depends(get_session),
    user_id: str = Depends(require_user_id),
):
    return result_service.get_result(session, user_id, result_id)
