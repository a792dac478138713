"""End-to-end tests for POST /validate-test-answers."""

import httpx
import pytest


def test_fill_blank_answer_scores_full_marks(client, capital_test):
    resp = client.post("/validate-test-answers", json={"testId": "capitals-1", "userAnswers": {"q1": "paris"}})
    assert resp.status_code == 200
    data = resp.json()
    assert data["score"] == 1
    assert data["totalQuestions"] == 1
    assert data["percentage"] == 100
    assert data["results"] == [
        {
            "questionId": "q1",
            "question": "The capital of France is ____.",
            "userAnswer": "paris",
            "correctAnswer": "Paris",
            "explanation": "Paris is the capital of France.",
            "isCorrect": True,
        }
    ]


def test_empty_submission_reports_null_answers(client, capital_test):
    resp = client.post("/validate-test-answers", json={"testId": "capitals-1", "userAnswers": {}})
    assert resp.status_code == 200
    data = resp.json()
    assert data["score"] == 0
    assert data["percentage"] == 0
    assert data["results"][0]["userAnswer"] is None
    assert data["results"][0]["isCorrect"] is False


def test_mixed_encodings_are_graded_together(client, mixed_test):
    answers = {"legacy": "blue", "text": 2, "tf": " true "}
    resp = client.post("/validate-test-answers", json={"testId": "mixed-1", "userAnswers": answers})
    assert resp.status_code == 200
    data = resp.json()
    assert [r["isCorrect"] for r in data["results"]] == [True, True, True]
    # Raw answers and stored answers pass through uncoerced
    assert [r["userAnswer"] for r in data["results"]] == ["blue", 2, " true "]
    assert [r["correctAnswer"] for r in data["results"]] == [1, "Green", "True"]


def test_parts_results_follow_part_order(client, parts_test):
    resp = client.post(
        "/validate-test-answers",
        json={"testId": "reading-parts", "userAnswers": {"qB": "beta", "qA": "wrong"}},
    )
    assert resp.status_code == 200
    data = resp.json()
    assert [r["questionId"] for r in data["results"]] == ["qA", "qB"]
    assert data["score"] == 1
    assert data["percentage"] == 50


def test_test_without_questions_scores_zero(client):
    from conftest import store_test

    store_test("empty-1", questions=[])
    resp = client.post("/validate-test-answers", json={"testId": "empty-1", "userAnswers": {}})
    assert resp.status_code == 200
    assert resp.json() == {"score": 0, "totalQuestions": 0, "percentage": 0, "results": []}


def test_unknown_test_is_404(client):
    resp = client.post("/validate-test-answers", json={"testId": "nope", "userAnswers": {}})
    assert resp.status_code == 404
    assert resp.json() == {"error": "Test not found"}


@pytest.mark.parametrize(
    "body,message",
    [
        ({"userAnswers": {}}, "Invalid testId"),
        ({"testId": "", "userAnswers": {}}, "Invalid testId"),
        ({"testId": "t" * 101, "userAnswers": {}}, "Invalid testId"),
        ({"testId": "capitals-1", "userAnswers": ["paris"]}, "userAnswers must be an object"),
        ({"testId": "capitals-1"}, "userAnswers must be an object"),
        ({"testId": "capitals-1", "userAnswers": {"q1": True}}, "Answer for question q1"),
    ],
)
def test_malformed_submissions_are_400(client, capital_test, body, message):
    resp = client.post("/validate-test-answers", json=body)
    assert resp.status_code == 400
    assert message in resp.json()["error"]


def test_non_object_body_is_400(client):
    resp = client.post("/validate-test-answers", json=["capitals-1"])
    assert resp.status_code == 400
    assert "error" in resp.json()


def test_malformed_stored_question_is_500(client):
    from conftest import store_test

    store_test("broken-1", questions=[{"id": "q1", "type": "fill-blank"}])
    resp = client.post("/validate-test-answers", json={"testId": "broken-1", "userAnswers": {}})
    assert resp.status_code == 500
    assert "malformed" in resp.json()["error"]


# --- hosted backend as the test repository ---


@pytest.fixture
def supabase_settings(settings):
    settings.TEST_REPOSITORY_BACKEND = "supabase"
    return settings


def test_hosted_backend_record_is_graded(client, supabase_settings, upstream):
    record = {
        "id": "remote-1",
        "title": "Remote",
        "questions": [{"id": "q1", "type": "multiple-choice", "question": "Pick",
                       "options": ["A", "B"], "correctAnswer": 0, "explanation": ""}],
        "parts": None,
    }
    upstream.handler = lambda request: httpx.Response(200, json=[record])

    resp = client.post("/validate-test-answers", json={"testId": "remote-1", "userAnswers": {"q1": "a"}})
    assert resp.status_code == 200
    assert resp.json()["score"] == 1

    sent = upstream.requests[0]
    assert sent.url.path == "/rest/v1/tests"
    assert sent.url.params["id"] == "eq.remote-1"
    assert sent.headers["apikey"] == "service-key"
    assert sent.headers["authorization"] == "Bearer service-key"


def test_hosted_backend_empty_result_is_404(client, supabase_settings, upstream):
    upstream.handler = lambda request: httpx.Response(200, json=[])
    resp = client.post("/validate-test-answers", json={"testId": "missing", "userAnswers": {}})
    assert resp.status_code == 404


def test_hosted_backend_failure_is_500(client, supabase_settings, upstream):
    upstream.handler = lambda request: httpx.Response(503, text="unavailable")
    resp = client.post("/validate-test-answers", json={"testId": "remote-1", "userAnswers": {}})
    assert resp.status_code == 500
    assert resp.json() == {"error": "Failed to fetch test"}


def test_hosted_backend_without_credentials_is_500(client, supabase_settings, upstream):
    supabase_settings.SUPABASE_SERVICE_ROLE_KEY = None
    resp = client.post("/validate-test-answers", json={"testId": "remote-1", "userAnswers": {}})
    assert resp.status_code == 500
    assert upstream.requests == []
