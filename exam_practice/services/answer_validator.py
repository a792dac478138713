"""Server-side answer validation and scoring.

Correct answers always come from the privileged test repository; the
caller's submission only contributes the learner's answers.

Two encodings of ``correctAnswer`` coexist in stored tests:

- legacy: a zero-based index into ``options`` (multiple-choice only)
- current: the literal answer text

Learners may submit either an option index or the option text, so the
comparison is dispatched on both the stored encoding and the submitted type.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from pydantic import ValidationError as SchemaError

from exam_practice import errors
from exam_practice.repositories import TestRepository
from exam_practice.schemas import AnswerValue, Question, QuestionResult, ScoreReport

logger = logging.getLogger(__name__)

TEST_ID_MAX_LENGTH = 100


def is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def option_at(options: Sequence[str], index: Any) -> Optional[str]:
    """Return ``options[index]`` for a whole, in-range index; otherwise None."""
    if not is_number(index):
        return None
    if isinstance(index, float):
        if not index.is_integer():
            return None
        index = int(index)
    if index < 0 or index >= len(options):
        return None
    return options[index]


def text_form(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def normalize_answer(value: Any) -> str:
    """Comparison form of an answer: text, trimmed, lower-cased."""
    return text_form(value).strip().lower()


def is_answer_correct(question: Question, user_answer: AnswerValue) -> bool:
    """Judge one answer against the stored correct answer."""
    correct = question.correct_answer
    options = question.options

    if question.type == "multiple-choice" and options is not None:
        if is_number(correct):
            # legacy: stored answer is an option index
            if is_number(user_answer):
                return user_answer == correct
            correct_text = option_at(options, correct)
            if correct_text is None:
                return False
            return normalize_answer(user_answer) == normalize_answer(correct_text)

        if is_number(user_answer):
            chosen = option_at(options, user_answer)
            if chosen is not None:
                return normalize_answer(chosen) == normalize_answer(correct)
            # a number that names no option is compared as the answer text itself

    return normalize_answer(user_answer) == normalize_answer(correct)


def _parse_question(raw: Any, position: int) -> Question:
    try:
        return Question.model_validate(raw)
    except SchemaError as exc:
        logger.warning("Question %s of stored test is malformed: %s", position, exc)
        raise errors.MalformedTestError(f"Question {position} of this test is malformed") from exc


def flatten_questions(record: Mapping[str, Any]) -> List[Question]:
    """Return the test's questions in grading order.

    Part questions come first-part-first; a flat ``questions`` list is used
    only when the record has no ``parts``. A record with neither has no
    questions.
    """
    parts = record.get("parts")
    if parts is not None:
        if not isinstance(parts, list):
            raise errors.MalformedTestError("Test parts must be a list")
        raw_questions: List[Any] = []
        for part in parts:
            if not isinstance(part, Mapping) or not isinstance(part.get("questions"), list):
                raise errors.MalformedTestError("Every test part must hold a list of questions")
            raw_questions.extend(part["questions"])
    else:
        raw_questions = record.get("questions") or []
        if not isinstance(raw_questions, list):
            raise errors.MalformedTestError("Test questions must be a list")

    return [_parse_question(raw, position) for position, raw in enumerate(raw_questions, start=1)]


def build_report(questions: Sequence[Question], user_answers: Mapping[str, Any]) -> ScoreReport:
    results = [
        QuestionResult(
            question_id=question.id,
            question=question.question,
            user_answer=user_answers.get(question.id),
            correct_answer=question.correct_answer,
            explanation=question.explanation,
            is_correct=is_answer_correct(question, user_answers.get(question.id)),
        )
        for question in questions
    ]
    score = sum(1 for result in results if result.is_correct)
    total = len(results)
    # An empty test scores 0% rather than an undefined ratio
    percentage = (score / total) * 100 if total else 0.0
    return ScoreReport(score=score, total_questions=total, percentage=percentage, results=results)


def grade_record(record: Mapping[str, Any], user_answers: Mapping[str, Any]) -> ScoreReport:
    """Grade answers against an already-fetched test record. No I/O."""
    return build_report(flatten_questions(record), user_answers)


def check_submission(test_id: Any, user_answers: Any) -> None:
    """Raise ``errors.ValidationError`` unless the submission is well formed."""
    if not isinstance(test_id, str) or not test_id or len(test_id) > TEST_ID_MAX_LENGTH:
        raise errors.ValidationError("Invalid testId")
    if not isinstance(user_answers, Mapping):
        raise errors.ValidationError("userAnswers must be an object")
    for question_id, answer in user_answers.items():
        if answer is not None and not isinstance(answer, str) and not is_number(answer):
            raise errors.ValidationError(
                f"Answer for question {question_id} must be a string, number or null"
            )


class AnswerValidator:
    """Scores submissions using a privileged test repository.

    The repository must be able to read correct answers; it is passed in
    explicitly rather than picked up from ambient credentials.
    """

    def __init__(self, repository: TestRepository):
        self.repository = repository

    def fetch_test(self, test_id: str) -> Dict[str, Any]:
        record = self.repository.fetch_by_id(test_id)
        if record is None:
            raise errors.NotFound("Test not found")
        return record

    def grade(self, test_id: Any, user_answers: Any) -> Tuple[Dict[str, Any], ScoreReport]:
        """Validate, fetch and grade; returns the test record with the report."""
        check_submission(test_id, user_answers)
        record = self.fetch_test(test_id)
        report = grade_record(record, user_answers)
        logger.info("Test %s validated: %s/%s", test_id, report.score, report.total_questions)
        return record, report

    def score(self, test_id: Any, user_answers: Any) -> ScoreReport:
        return self.grade(test_id, user_answers)[1]
