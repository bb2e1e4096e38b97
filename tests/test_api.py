"""
End-to-end tests of the HTTP surface through FastAPI's TestClient.
"""
import inspect
from datetime import timedelta

import pytest
from fastapi.routing import APIRoute

from quizboard.main import app
from quizboard.model import User
from quizboard.time_util import utcnow

from conftest import ADMIN_ID, mc_question


@pytest.fixture
def admin_headers(auth_headers):
    return auth_headers(ADMIN_ID, email="ada@example.com", first_name="Ada", last_name="Admin")


@pytest.fixture
def user_headers(auth_headers):
    return auth_headers("user-1", email="una@example.com", first_name="Una", last_name="User")


def open_quiz_body(**overrides):
    now = utcnow()
    body = {
        "title": "Warm-up",
        "duration": 5,
        "scheduled_start": (now - timedelta(hours=1)).isoformat(),
        "scheduled_end": (now + timedelta(hours=1)).isoformat(),
        "questions": [mc_question("a"), mc_question("b")],
    }
    body.update(overrides)
    return body


@pytest.fixture
def created_quiz(client, admin_headers):
    res = client.post("/quizzes", json=open_quiz_body(), headers=admin_headers)
    assert res.status_code == 201, res.text
    return res.json()


def answers(quiz, *values):
    return {str(q["question_id"]): v for q, v in zip(quiz["questions"], values)}


def test_root(client):
    res = client.get("/")
    assert res.status_code == 200
    assert "service" in res.json()


def test_route_handlers_run_in_threadpool():
    # handlers call the blocking Session, so none may run on the event loop
    routes = [r for r in app.routes if isinstance(r, APIRoute)]
    assert routes
    assert [r.path for r in routes if inspect.iscoroutinefunction(r.endpoint)] == []


def test_requires_token(client):
    assert client.get("/quizzes/active").status_code == 403


def test_rejects_bad_token(client):
    res = client.get("/quizzes/active", headers={"Authorization": "Bearer not-a-jwt"})
    assert res.status_code == 403


class TestCreate:

    def test_admin_creates_quiz(self, created_quiz):
        assert created_quiz["total_questions"] == 2
        assert created_quiz["is_active"] is True
        assert created_quiz["questions"][0]["correct_answer"] == "a"

    def test_non_admin_forbidden(self, client, user_headers):
        res = client.post("/quizzes", json=open_quiz_body(), headers=user_headers)
        assert res.status_code == 403
        assert res.json()["error"] == "forbidden"

    def test_validation_errors_are_per_field(self, client, admin_headers):
        res = client.post("/quizzes", json=open_quiz_body(duration=0, questions=[]), headers=admin_headers)
        assert res.status_code == 400
        body = res.json()
        assert body["error"] == "validation_error"
        assert {e["field"] for e in body["errors"]} == {"duration", "questions"}

    def test_missing_fields_reported_like_invalid_ones(self, client, admin_headers):
        res = client.post("/quizzes", json={"duration": 5, "questions": [mc_question("a")]}, headers=admin_headers)
        assert res.status_code == 400
        body = res.json()
        assert body["error"] == "validation_error"
        assert {e["field"] for e in body["errors"]} == {"title"}

    def test_missing_question_fields(self, client, admin_headers):
        res = client.post("/quizzes", json={"title": "T", "duration": 5, "questions": [{"question_type": "short_answer"}]}, headers=admin_headers)
        assert res.status_code == 400
        assert {e["field"] for e in res.json()["errors"]} == {"questions[0].content", "questions[0].correct_answer"}

    def test_wrongly_typed_body(self, client, admin_headers):
        res = client.post("/quizzes", json={"title": "T", "duration": "soon", "questions": []}, headers=admin_headers)
        assert res.status_code == 422


class TestTakeQuiz:

    def test_listed_as_active(self, client, user_headers, created_quiz):
        res = client.get("/quizzes/active", headers=user_headers)
        assert res.status_code == 200
        quizzes = res.json()["quizzes"]
        assert [q["quiz_id"] for q in quizzes] == [created_quiz["quiz_id"]]
        assert "questions" not in quizzes[0]

    def test_fetch_hides_correct_answers(self, client, user_headers, created_quiz):
        res = client.get(f"/quizzes/{created_quiz['quiz_id']}", headers=user_headers)
        assert res.status_code == 200
        questions = res.json()["questions"]
        assert len(questions) == 2
        assert all("correct_answer" not in q for q in questions)

    def test_fetch_missing_quiz(self, client, user_headers):
        res = client.get("/quizzes/9999", headers=user_headers)
        assert res.status_code == 404
        assert res.json()["error"] == "not_found"

    def test_submit_then_resubmit(self, client, user_headers, created_quiz):
        quiz_id = created_quiz["quiz_id"]
        res = client.post(
            f"/quizzes/{quiz_id}/attempts",
            json={"answers": answers(created_quiz, "a", "c")},
            headers=user_headers,
        )
        assert res.status_code == 201
        assert res.json() == {"score": 1, "total_score": 2, "percentage": 50, "passed": False}

        again = client.post(
            f"/quizzes/{quiz_id}/attempts",
            json={"answers": answers(created_quiz, "a", "b")},
            headers=user_headers,
        )
        assert again.status_code == 409
        assert again.json()["error"] == "already_completed"

        fetch = client.get(f"/quizzes/{quiz_id}", headers=user_headers)
        assert fetch.json()["error"] == "already_completed"

        mine = client.get(f"/quizzes/{quiz_id}/attempts/me", headers=user_headers)
        assert mine.status_code == 200
        assert mine.json()["score"] == 1

    def test_start_then_submit(self, client, user_headers, created_quiz):
        quiz_id = created_quiz["quiz_id"]
        started = client.post(f"/quizzes/{quiz_id}/attempts/start", headers=user_headers)
        assert started.status_code == 201
        assert started.json()["completed"] is False

        res = client.post(
            f"/quizzes/{quiz_id}/attempts",
            json={"answers": answers(created_quiz, "a", "b")},
            headers=user_headers,
        )
        assert res.json()["percentage"] == 100
        mine = client.get(f"/quizzes/{quiz_id}/attempts/me", headers=user_headers).json()
        assert mine["attempt_id"] == started.json()["attempt_id"]
        assert mine["completed"] is True
        assert mine["time_taken"] >= 0

    def test_no_attempt_yet(self, client, user_headers, created_quiz):
        res = client.get(f"/quizzes/{created_quiz['quiz_id']}/attempts/me", headers=user_headers)
        assert res.status_code == 404

    def test_expired_quiz(self, client, admin_headers, user_headers):
        now = utcnow()
        body = open_quiz_body(
            scheduled_start=(now - timedelta(hours=2)).isoformat(),
            scheduled_end=(now - timedelta(hours=1)).isoformat(),
        )
        quiz = client.post("/quizzes", json=body, headers=admin_headers).json()

        res = client.post(
            f"/quizzes/{quiz['quiz_id']}/attempts",
            json={"answers": answers(quiz, "a", "b")},
            headers=user_headers,
        )
        assert res.status_code == 400
        assert res.json()["error"] == "expired"
        assert client.get(f"/quizzes/{quiz['quiz_id']}/attempts/me", headers=user_headers).status_code == 404

    def test_not_started_quiz(self, client, admin_headers, user_headers):
        now = utcnow()
        body = open_quiz_body(
            scheduled_start=(now + timedelta(hours=1)).isoformat(),
            scheduled_end=(now + timedelta(hours=2)).isoformat(),
        )
        quiz = client.post("/quizzes", json=body, headers=admin_headers).json()
        res = client.get(f"/quizzes/{quiz['quiz_id']}", headers=user_headers)
        assert res.status_code == 400
        assert res.json()["error"] == "not_started"

    def test_closed_quiz(self, client, admin_headers, user_headers, created_quiz):
        quiz_id = created_quiz["quiz_id"]
        res = client.patch(f"/quizzes/{quiz_id}/active", json={"is_active": False}, headers=admin_headers)
        assert res.status_code == 200
        assert res.json()["is_active"] is False
        assert client.get("/quizzes/active", headers=user_headers).json()["quizzes"] == []

        forbidden = client.patch(f"/quizzes/{quiz_id}/active", json={"is_active": True}, headers=user_headers)
        assert forbidden.status_code == 403


class TestRankingsAndHistory:

    def test_rankings(self, client, auth_headers, created_quiz):
        quiz_id = created_quiz["quiz_id"]
        submissions = [
            ("u-low", "Lou", ("c", "c")),
            ("u-top", "Tia", ("a", "b")),
            ("u-mid", "Mo", ("a", "c")),
        ]
        for user_id, name, values in submissions:
            client.post(
                f"/quizzes/{quiz_id}/attempts",
                json={"answers": answers(created_quiz, *values)},
                headers=auth_headers(user_id, first_name=name),
            )

        res = client.get(f"/quizzes/{quiz_id}/rankings", headers=auth_headers("viewer"))
        assert res.status_code == 200
        rankings = res.json()["rankings"]
        assert [r["user_id"] for r in rankings] == ["u-top", "u-mid", "u-low"]
        assert rankings[0]["name"] == "Tia"
        assert [r["score"] for r in rankings] == [2, 1, 0]

    def test_rankings_unknown_quiz(self, client, user_headers):
        assert client.get("/quizzes/777/rankings", headers=user_headers).status_code == 404

    def test_my_attempts(self, client, user_headers, created_quiz):
        client.post(
            f"/quizzes/{created_quiz['quiz_id']}/attempts",
            json={"answers": answers(created_quiz, "a", "b")},
            headers=user_headers,
        )
        res = client.get("/users/me/attempts", headers=user_headers)
        assert res.status_code == 200
        attempts = res.json()["attempts"]
        assert len(attempts) == 1
        assert attempts[0]["quiz_title"] == "Warm-up"
        assert attempts[0]["score"] == 2


class TestProfile:

    def test_profile_mirrors_token_claims(self, client, user_headers):
        res = client.get("/users/me", headers=user_headers)
        assert res.status_code == 200
        assert res.json() == {
            "user_id": "user-1",
            "email": "una@example.com",
            "first_name": "Una",
            "last_name": "User",
            "is_admin": False,
        }

    def test_profile_refreshes_name(self, client, auth_headers):
        client.get("/users/me", headers=auth_headers("user-9", first_name="Old"))
        res = client.get("/users/me", headers=auth_headers("user-9", first_name="New"))
        assert res.json()["first_name"] == "New"

    def test_admin_flag(self, client, admin_headers):
        assert client.get("/users/me", headers=admin_headers).json()["is_admin"] is True

    def test_reused_email_moves_to_new_account(self, client, db, auth_headers):
        client.get("/users/me", headers=auth_headers("old-account", email="shared@example.com"))
        res = client.get("/users/me", headers=auth_headers("new-account", email="shared@example.com"))
        assert res.status_code == 200
        assert res.json()["email"] == "shared@example.com"

        assert db.get(User, "old-account").email is None
        assert db.get(User, "new-account").email == "shared@example.com"

    def test_token_without_email_keeps_stored_email(self, client, db, auth_headers):
        client.get("/users/me", headers=auth_headers("user-5", email="five@example.com"))
        res = client.get("/users/me", headers=auth_headers("user-5", first_name="Five"))
        assert res.status_code == 200
        assert res.json()["email"] == "five@example.com"
        assert res.json()["first_name"] == "Five"
        assert db.get(User, "user-5").email == "five@example.com"
