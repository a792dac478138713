import asyncio
from typing import Any, Callable, Dict, List, Optional

import httpx
import pytest
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine, text

from exam_practice.config import Settings, get_settings
from exam_practice.database import get_session
from exam_practice.deps import get_http_client
from exam_practice.main import app
from exam_practice.models import PracticeTest

# ============================================================================
# IN-MEMORY DATABASE FOR TESTING
# ============================================================================

# StaticPool keeps every connection on the same in-memory database
test_engine = create_engine(
    "sqlite:///:memory:",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)


@pytest.fixture(scope="session", autouse=True)
def setup_test_db():
    """Create all tables in the test database once per session."""
    SQLModel.metadata.create_all(test_engine)
    yield
    SQLModel.metadata.drop_all(test_engine)


@pytest.fixture(autouse=True)
def cleanup_db_between_tests():
    """Clean up test data after each test."""
    yield
    with Session(test_engine) as session:
        session.exec(text("DELETE FROM practiceresult"))
        session.exec(text("DELETE FROM practicesession"))
        session.exec(text("DELETE FROM practicetest"))
        session.commit()


@pytest.fixture
def session():
    """Provide a database session for tests."""
    with Session(test_engine) as session:
        yield session


# ============================================================================
# UPSTREAM HTTP SERVICES
# ============================================================================


class FakeUpstream:
    """httpx transport handler standing in for the hosted backend and LLM gateway."""

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self.handler: Optional[Callable[[httpx.Request], httpx.Response]] = None

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.handler is None:
            return httpx.Response(500, json={"message": "no upstream configured"})
        return self.handler(request)

    def client(self) -> httpx.Client:
        return httpx.Client(transport=httpx.MockTransport(self))


@pytest.fixture
def upstream():
    return FakeUpstream()


@pytest.fixture
def settings():
    return Settings(
        DATABASE_URL="sqlite:///:memory:",
        TEST_REPOSITORY_BACKEND="sql",
        SUPABASE_URL="https://backend.test",
        SUPABASE_SERVICE_ROLE_KEY="service-key",
        LLM_GATEWAY_URL="https://llm.test/v1/chat/completions",
        LLM_API_KEY="llm-key",
    )


# ============================================================================
# FASTAPI APP & TEST CLIENT
# ============================================================================


@pytest.fixture
def client(settings, upstream):
    """Drive the app through httpx's ASGI transport with a sync wrapper."""

    def override_get_session():
        with Session(test_engine) as session:
            yield session

    def override_get_http_client():
        with upstream.client() as http_client:
            yield http_client

    app.dependency_overrides[get_session] = override_get_session
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_http_client] = override_get_http_client

    loop = asyncio.new_event_loop()
    transport = httpx.ASGITransport(app=app)
    async_client = httpx.AsyncClient(transport=transport, base_url="http://testserver")

    class SyncClientWrapper:
        def __init__(self, async_client, loop):
            self.async_client = async_client
            self.loop = loop

        def get(self, *args, **kwargs):
            return self.loop.run_until_complete(self.async_client.get(*args, **kwargs))

        def post(self, *args, **kwargs):
            return self.loop.run_until_complete(self.async_client.post(*args, **kwargs))

        def put(self, *args, **kwargs):
            return self.loop.run_until_complete(self.async_client.put(*args, **kwargs))

        def delete(self, *args, **kwargs):
            return self.loop.run_until_complete(self.async_client.delete(*args, **kwargs))

    yield SyncClientWrapper(async_client, loop)

    loop.run_until_complete(async_client.aclose())
    loop.close()
    app.dependency_overrides.clear()


# ============================================================================
# ENTITY FIXTURES
# ============================================================================

COLORS = ["Red", "Blue", "Green"]


def store_test(test_id: str = "ielts-reading-1", **fields: Any) -> Dict[str, Any]:
    """Insert a PracticeTest row directly and return its column values."""
    values: Dict[str, Any] = {
        "id": test_id,
        "title": "IELTS Reading Practice",
        "description": "Academic reading",
        "category": "IELTS",
        "difficulty": "Intermediate",
        "duration": 20,
        "questions": [],
        "parts": None,
    }
    values.update(fields)
    with Session(test_engine) as session:
        session.add(PracticeTest(**values))
        session.commit()
    return values


@pytest.fixture
def capital_test():
    """Flat test with a single fill-in-the-blank question."""
    return store_test(
        "capitals-1",
        title="Capitals",
        questions=[
            {
                "id": "q1",
                "type": "fill-blank",
                "question": "The capital of France is ____.",
                "correctAnswer": "Paris",
                "explanation": "Paris is the capital of France.",
            }
        ],
    )


@pytest.fixture
def mixed_test():
    """Flat test mixing legacy-index, text-encoded and true/false questions."""
    return store_test(
        "mixed-1",
        title="Mixed Grammar",
        category="Checkpoint",
        questions=[
            {"id": "legacy", "type": "multiple-choice", "question": "Sky colour?",
             "options": COLORS, "correctAnswer": 1, "explanation": "Blue sky."},
            {"id": "text", "type": "multiple-choice", "question": "Grass colour?",
             "options": COLORS, "correctAnswer": "Green", "explanation": "Green grass."},
            {"id": "tf", "type": "true-false", "question": "Water is wet.",
             "correctAnswer": "True", "explanation": "It is."},
        ],
    )


@pytest.fixture
def parts_test():
    """Test grouped into two parts."""
    return store_test(
        "reading-parts",
        title="Reading in Parts",
        parts=[
            {"id": "p1", "title": "Passage 1", "context": "A short passage.",
             "questions": [{"id": "qA", "type": "fill-blank", "question": "A?",
                            "correctAnswer": "alpha", "explanation": ""}]},
            {"id": "p2", "title": "Passage 2",
             "questions": [{"id": "qB", "type": "fill-blank", "question": "B?",
                            "correctAnswer": "beta", "explanation": ""}]},
        ],
    )
