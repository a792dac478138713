"""Grading endpoints: server-side answer validation and AI analysis."""

import httpx
from fastapi import APIRouter, Body, Depends

from exam_practice.config import Settings, get_settings
from exam_practice.deps import get_answer_validator, get_http_client
from exam_practice.schemas import AnalysisOut, ScoreReport, SubmissionIn
from exam_practice.services.answer_validator import AnswerValidator, flatten_questions
from exam_practice.services.feedback_service import request_analysis

router = APIRouter()


@router.post("/validate-test-answers", response_model=ScoreReport)
def validate_test_answers(
    payload: SubmissionIn = Body(...),
    validator: AnswerValidator = Depends(get_answer_validator),
):
    """Score a submission against the stored correct answers."""
    return validator.score(payload.test_id, payload.user_answers)


@router.post("/analyze-test-results", response_model=AnalysisOut)
def analyze_test_results(
    payload: SubmissionIn = Body(...),
    validator: AnswerValidator = Depends(get_answer_validator),
    settings: Settings = Depends(get_settings),
    http_client: httpx.Client = Depends(get_http_client),
):
    """Grade a submission, then ask the LLM gateway for written feedback."""
    record, report = validator.grade(payload.test_id, payload.user_answers)
    title = str(record.get("title") or payload.test_id)
    analysis = request_analysis(title, report, flatten_questions(record), settings, http_client)
    return AnalysisOut(
        analysis=analysis,
        score=report.score,
        total_questions=report.total_questions,
        percentage=report.percentage,
    )
