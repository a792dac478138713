"""Persisting and reading graded test results."""

from typing import Any, List, Optional

from sqlmodel import Session, select

from exam_practice import errors
from exam_practice.models import PracticeResult
from exam_practice.services.answer_validator import AnswerValidator
from exam_practice.utils import sanitize_plain_text


def save_result(
    session: Session,
    validator: AnswerValidator,
    user_id: str,
    test_id: Any,
    user_answers: Any,
    ai_analysis: Optional[str] = None,
) -> PracticeResult:
    """Grade the submission server-side and store the outcome.

    The stored score always comes from the validator, never from the caller.
    """
    record, report = validator.grade(test_id, user_answers)
    result = PracticeResult(
        user_id=user_id,
        test_id=test_id,
        test_title=str(record.get("title") or ""),
        test_category=str(record.get("category") or ""),
        score=report.score,
        total_questions=report.total_questions,
        percentage=report.percentage,
        answers=dict(user_answers),
        ai_analysis=sanitize_plain_text(ai_analysis) if ai_analysis else None,
    )
    session.add(result)
    session.commit()
    session.refresh(result)
    return result


def list_results(session: Session, user_id: str) -> List[PracticeResult]:
    stmt = (
        select(PracticeResult)
        .where(PracticeResult.user_id == user_id)
        .order_by(PracticeResult.completed_at.desc(), PracticeResult.id.desc())
    )
    return list(session.exec(stmt).all())


def get_result(session: Session, user_id: str, result_id: int) -> PracticeResult:
    result = session.get(PracticeResult, result_id)
    # Other learners' results are reported as missing
    if not result or result.user_id != user_id:
        raise errors.NotFound("Result not found")
    return result
