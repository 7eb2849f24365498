from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from auditions.databases.database import get_db
from auditions.main import app
from auditions.services.criteria_service import CriteriaService
from auditions.services.evaluation_workflow_service import EvaluationWorkflow
from auditions.services.session_service import SessionStore, get_session_store

from conftest import FakeGemini, FakeQuestionService, build_contestant

QUESTIONS = ["Your co-host freezes on stage. What do you do?"]


@pytest.fixture()
def client(session_factory):
    db = session_factory()
    db.add_all([
        build_contestant("CS22A001", "Anchor"),
        build_contestant("CS22A002", "Video Editor"),
    ])
    db.commit()
    db.close()

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    store = SessionStore(workflow_factory=lambda: EvaluationWorkflow(
        criteria_service=CriteriaService(gemini=FakeGemini(error=RuntimeError("offline"))),
        question_service=FakeQuestionService(questions=QUESTIONS),
    ))

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_session_store] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.clear()


def login(client, role, password):
    response = client.post("/api/v1/auth/login", json={"role": role, "password": password})
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['data']['token']}"}


@pytest.fixture()
def panel(client):
    return login(client, "panel", "panel-secret")


@pytest.fixture()
def admin(client):
    return login(client, "admin", "admin-secret")


def test_login_with_wrong_password_is_rejected(client):
    response = client.post("/api/v1/auth/login", json={"role": "admin", "password": "guess"})

    assert response.status_code == 401
    assert response.json() == {"success": False, "message": "Invalid password"}


def test_protected_routes_require_a_session(client):
    assert client.get("/api/v1/panel/evaluation").status_code == 401
    assert client.get("/api/v1/admin/dashboard").status_code == 401


def test_roles_are_kept_apart(client, panel, admin):
    assert client.get("/api/v1/admin/dashboard", headers=panel).status_code == 403
    assert client.post("/api/v1/panel/search", json={"roll": "CS22A001"}, headers=admin).status_code == 403


def test_me_and_logout(client, panel):
    assert client.get("/api/v1/auth/me", headers=panel).json() == {"role": "panel"}

    assert client.post("/api/v1/auth/logout", headers=panel).status_code == 200
    assert client.get("/api/v1/auth/me", headers=panel).status_code == 401


def test_search_unknown_roll_is_404(client, panel):
    response = client.post("/api/v1/panel/search", json={"roll": "zz999"}, headers=panel)

    assert response.status_code == 404
    assert response.json()["success"] is False
    assert client.get("/api/v1/panel/evaluation", headers=panel).json()["state"] == "not_found"


def test_empty_roll_is_a_bad_request(client, panel):
    assert client.post("/api/v1/panel/search", json={"roll": "  "}, headers=panel).status_code == 400


def test_slider_out_of_range_is_a_bad_request(client, panel):
    client.post("/api/v1/panel/search", json={"roll": "CS22A001"}, headers=panel)

    response = client.patch("/api/v1/panel/evaluation", json={"scores": [{"index": 0, "score": 21}]}, headers=panel)

    assert response.status_code == 400


def test_edit_before_search_conflicts(client, panel):
    response = client.patch("/api/v1/panel/evaluation", json={"feedback": "Too early for this"}, headers=panel)

    assert response.status_code == 409


def test_short_feedback_is_unprocessable(client, panel):
    client.post("/api/v1/panel/search", json={"roll": "CS22A001"}, headers=panel)
    client.patch("/api/v1/panel/evaluation", json={"feedback": "ok"}, headers=panel)

    assert client.post("/api/v1/panel/evaluation/save", headers=panel).status_code == 422


def test_full_evaluation_flow(client, panel, admin):
    search = client.post("/api/v1/panel/search", json={"roll": "cs22a001"}, headers=panel)
    assert search.status_code == 200
    body = search.json()
    assert body["state"] == "found"
    assert body["criteria_source"] == "schema"
    assert body["live_total"] == 50.0
    assert body["questions"] == QUESTIONS

    edit = client.patch(
        "/api/v1/panel/evaluation",
        json={
            "scores": [{"index": i, "score": 20} for i in range(len(body["criteria"]))],
            "feedback": "Commanded the stage from start to finish.",
        },
        headers=panel,
    )
    assert edit.json()["state"] == "evaluating"
    assert edit.json()["live_total"] == 100.0

    saved = client.post("/api/v1/panel/evaluation/save", headers=panel)
    assert saved.status_code == 200
    assert saved.json()["success"] is True
    assert saved.json()["data"]["contestant"]["score"] == 100.0
    assert saved.json()["data"]["criteria_source"] == "saved"

    dashboard = client.get("/api/v1/admin/dashboard", headers=admin).json()
    assert (dashboard["total"], dashboard["evaluated"], dashboard["not_evaluated"]) == (2, 1, 1)
    assert dashboard["average_score_percent"] == 100.0

    markings = client.get("/api/v1/admin/markings", headers=admin).json()
    assert [m["roll"] for m in markings] == ["CS22A001"]
    assert markings[0]["feedback"] == "Commanded the stage from start to finish."

    board = client.get("/api/v1/leaderboard").json()
    assert [(e["rank"], e["roll"], e["percentage"]) for e in board] == [(1, "CS22A001", 100.0)]

    reset = client.post("/api/v1/admin/reset", headers=admin)
    assert reset.status_code == 200
    assert reset.json()["data"]["evaluated"] == 0
    assert client.get("/api/v1/leaderboard").json() == []


def test_participants_listing(client, admin):
    response = client.get(
        "/api/v1/admin/participants",
        params={"search": "cs22", "sort": "roll", "direction": "ascending"},
        headers=admin,
    )

    assert response.status_code == 200
    assert [p["roll"] for p in response.json()["participants"]] == ["CS22A001", "CS22A002"]
    assert response.json()["positions"] == ["all", "Anchor", "Video Editor"]


def test_participants_unknown_sort_key(client, admin):
    response = client.get("/api/v1/admin/participants", params={"sort": "mail"}, headers=admin)

    assert response.status_code == 400


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["services"]["database"] == "up"
