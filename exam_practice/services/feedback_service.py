"""Readable per-question feedback and AI analysis of a graded test.

Grading itself is done by the answer validator; this module only turns a
ScoreReport into text and asks the LLM gateway for a written analysis.
"""

import logging
from typing import Any, Optional, Sequence

import httpx

from exam_practice import errors
from exam_practice.config import Settings
from exam_practice.schemas import AnswerValue, Question, ScoreReport
from exam_practice.services.answer_validator import is_number, option_at, text_form

logger = logging.getLogger(__name__)

NO_ANSWER = "(No answer)"

SYSTEM_PROMPT = (
    "You are an experienced English teacher who specializes in analyzing "
    "and providing constructive feedback to students."
)


def describe_answer(question: Question, user_answer: AnswerValue) -> str:
    """Display text for a learner's answer."""
    if user_answer is None or user_answer == "":
        return NO_ANSWER
    if question.type == "multiple-choice" and question.options is not None and is_number(user_answer):
        chosen = option_at(question.options, user_answer)
        if chosen is not None:
            return chosen
    return text_form(user_answer)


def describe_correct(question: Question) -> str:
    """Display text for the correct answer, resolving legacy option indexes."""
    correct = question.correct_answer
    if question.type == "multiple-choice" and question.options is not None and is_number(correct):
        return option_at(question.options, correct) or ""
    return text_form(correct)


def build_feedback(report: ScoreReport, questions: Sequence[Question]) -> str:
    blocks = []
    for number, (question, result) in enumerate(zip(questions, report.results), start=1):
        verdict = "Correct" if result.is_correct else "Incorrect"
        blocks.append(
            f"Question {number}: {verdict}\n"
            f"Question: {question.question}\n"
            f"Student's answer: {describe_answer(question, result.user_answer)}\n"
            f"Correct answer: {describe_correct(question)}"
        )
    return "\n\n".join(blocks)


def build_prompt(title: str, report: ScoreReport, questions: Sequence[Question]) -> str:
    return (
        "Analyze this student's test results.\n\n"
        f"TEST: {title}\n"
        f"SCORE: {report.score}/{report.total_questions} ({report.percentage:.0f}%)\n\n"
        f"QUESTION DETAILS:\n{build_feedback(report, questions)}\n\n"
        "Give an overall assessment, strengths, areas for improvement with the likely "
        "causes of the errors, 3-4 specific tips, and suggested exercises. "
        "Be encouraging and detailed."
    )


def _post(client: Optional[httpx.Client], settings: Settings, body: dict) -> httpx.Response:
    headers = {"Authorization": f"Bearer {settings.LLM_API_KEY}"}
    if client is not None:
        return client.post(
            settings.LLM_GATEWAY_URL, json=body, headers=headers, timeout=settings.LLM_TIMEOUT_SECONDS
        )
    with httpx.Client(timeout=settings.LLM_TIMEOUT_SECONDS) as own_client:
        return own_client.post(settings.LLM_GATEWAY_URL, json=body, headers=headers)


def request_analysis(
    title: str,
    report: ScoreReport,
    questions: Sequence[Question],
    settings: Settings,
    client: Optional[httpx.Client] = None,
) -> str:
    """Ask the LLM gateway for a written analysis of a graded test.

    Raises:
        UpstreamFailure: If the gateway is not configured, unreachable,
            rejects the request, or returns an unexpected payload
    """
    if not settings.LLM_API_KEY:
        logger.error("LLM_API_KEY is not configured")
        raise errors.UpstreamFailure("LLM_API_KEY is not configured")

    body = {
        "model": settings.LLM_MODEL,
        "messages": [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": build_prompt(title, report, questions)},
        ],
        "temperature": 0.7,
        "max_tokens": 1500,
    }
    logger.info("Analyzing test results for: %s", title)
    try:
        response = _post(client, settings, body)
    except httpx.HTTPError as exc:
        logger.error("AI gateway request failed: %s", exc)
        raise errors.UpstreamFailure("AI gateway is unavailable") from exc

    if response.status_code == 429:
        raise errors.UpstreamFailure("Rate limit exceeded, please try again later")
    if response.status_code == 402:
        raise errors.UpstreamFailure("AI credits exhausted")
    if not response.is_success:
        logger.error("AI gateway error: %s %s", response.status_code, response.text)
        raise errors.UpstreamFailure(f"AI gateway error: {response.status_code}")

    try:
        content: Any = response.json()["choices"][0]["message"]["content"]
    except (ValueError, KeyError, IndexError, TypeError) as exc:
        raise errors.UpstreamFailure("AI gateway returned an unexpected response") from exc
    if not isinstance(content, str):
        raise errors.UpstreamFailure("AI gateway returned an unexpected response")

    logger.info("Analysis completed successfully")
    return content
