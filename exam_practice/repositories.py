"""Access to stored test definitions.

Both repositories return the raw test record (a dict in the stored JSON
shape, answers included). They are privileged handles: only the answer
validator and services that strip answers before replying may use them.
"""

import logging
from typing import Any, Dict, List, Optional, Protocol

import httpx
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from exam_practice import errors
from exam_practice.models import PracticeTest

logger = logging.getLogger(__name__)

FETCH_FAILED = "Failed to fetch test"


class TestRepository(Protocol):
    def fetch_by_id(self, test_id: str) -> Optional[Dict[str, Any]]:
        """Return the full test record, or None when no test has this id."""
        ...


def to_record(test: PracticeTest) -> Dict[str, Any]:
    return {
        "id": test.id,
        "title": test.title,
        "description": test.description,
        "category": test.category,
        "difficulty": test.difficulty,
        "duration": test.duration,
        "questions": test.questions,
        "parts": test.parts,
        "audio_file_path": test.audio_file_path,
    }


class SqlTestRepository:
    """Test definitions kept in the service's own database."""

    def __init__(self, session: Session):
        self.session = session

    def get(self, test_id: str) -> Optional[PracticeTest]:
        try:
            return self.session.get(PracticeTest, test_id)
        except SQLAlchemyError as exc:
            logger.exception("Failed to load test %s", test_id)
            raise errors.UpstreamFailure(FETCH_FAILED) from exc

    def fetch_by_id(self, test_id: str) -> Optional[Dict[str, Any]]:
        test = self.get(test_id)
        return to_record(test) if test else None

    def list_tests(self, category: Optional[str] = None) -> List[PracticeTest]:
        stmt = select(PracticeTest)
        if category:
            stmt = stmt.where(PracticeTest.category == category)
        return list(self.session.exec(stmt.order_by(PracticeTest.title)).all())

    def save(self, test: PracticeTest) -> PracticeTest:
        self.session.add(test)
        self.session.commit()
        self.session.refresh(test)
        return test

    def delete(self, test: PracticeTest) -> None:
        self.session.delete(test)
        self.session.commit()


class SupabaseTestRepository:
    """Test definitions served by the hosted backend's REST API.

    Requests carry the service-role key so answer columns are readable
    regardless of row-level policies that hide them from learners.
    """

    def __init__(
        self,
        base_url: str,
        service_key: str,
        timeout: float = 10.0,
        client: Optional[httpx.Client] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.service_key = service_key
        self.timeout = timeout
        self._client = client

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.service_key}",
            "apikey": self.service_key,
            "Content-Type": "application/json",
        }

    def _get(self, url: str, params: Dict[str, str]) -> httpx.Response:
        if self._client is not None:
            return self._client.get(url, params=params, headers=self._headers(), timeout=self.timeout)
        with httpx.Client(timeout=self.timeout) as client:
            return client.get(url, params=params, headers=self._headers())

    def fetch_by_id(self, test_id: str) -> Optional[Dict[str, Any]]:
        url = f"{self.base_url}/rest/v1/tests"
        try:
            response = self._get(url, {"id": f"eq.{test_id}", "select": "*"})
        except httpx.HTTPError as exc:
            logger.error("Test repository request failed for %s: %s", test_id, exc)
            raise errors.UpstreamFailure(FETCH_FAILED) from exc

        if not response.is_success:
            logger.error(
                "Test repository returned HTTP %s for %s", response.status_code, test_id
            )
            raise errors.UpstreamFailure(FETCH_FAILED)

        try:
            rows = response.json()
        except ValueError as exc:
            logger.error("Test repository returned invalid JSON for %s", test_id)
            raise errors.UpstreamFailure(FETCH_FAILED) from exc

        if not isinstance(rows, list) or any(not isinstance(row, dict) for row in rows):
            logger.error("Unexpected test repository payload for %s", test_id)
            raise errors.UpstreamFailure(FETCH_FAILED)
        return rows[0] if rows else None
