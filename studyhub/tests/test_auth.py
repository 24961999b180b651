from __future__ import annotations

from fastapi.testclient import TestClient

from studyhub.app import app
from studyhub.auth.users import authenticate, list_users

client = TestClient(app)


def _login_user(c):
    c.post("/auth/login", json={"username": "student", "password": "student123"})


def _login_admin(c):
    c.post("/auth/login", json={"username": "admin", "password": "admin123"})


# ── Users ────────────────────────────────────────────────────────────────


def test_authenticate_returns_profile():
    user = authenticate("student", "student123")
    assert user == {"username": "student", "role": "student", "semester": 3, "department": "CSE"}
    assert authenticate("student", "wrong") is None


def test_list_users_hides_password_hashes():
    users = list_users()
    assert {u["role"] for u in users} == {"student", "faculty", "admin"}
    assert all("password_hash" not in u for u in users)


# ── Login / Logout ───────────────────────────────────────────────────────


def test_login_success_user():
    resp = client.post("/auth/login", json={"username": "student", "password": "student123"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "ok"
    assert body["user"]["username"] == "student"
    assert body["user"]["role"] == "student"


def test_login_success_admin():
    resp = client.post("/auth/login", json={"username": "admin", "password": "admin123"})
    assert resp.status_code == 200
    assert resp.json()["user"]["role"] == "admin"


def test_login_wrong_password():
    resp = client.post("/auth/login", json={"username": "student", "password": "wrong"})
    assert resp.status_code == 401


def test_login_unknown_user():
    resp = client.post("/auth/login", json={"username": "nobody", "password": "x"})
    assert resp.status_code == 401


def test_auth_me_when_logged_in():
    _login_user(client)
    resp = client.get("/auth/me")
    assert resp.status_code == 200
    assert resp.json()["semester"] == 3


def test_auth_me_not_logged_in():
    c = TestClient(app)  # fresh client, no session
    resp = c.get("/auth/me")
    assert resp.status_code == 401


def test_logout():
    _login_user(client)
    resp = client.post("/auth/logout")
    assert resp.status_code == 200
    assert resp.json()["status"] == "logged_out"
    # Session should be cleared
    resp = client.get("/auth/me")
    assert resp.status_code == 401


# ── Route protection ─────────────────────────────────────────────────────


def test_recommendations_requires_login():
    c = TestClient(app)
    assert c.get("/recommendations").status_code == 401


def test_feedback_requires_login():
    c = TestClient(app)
    resp = c.post("/recommendations/feedback", json={"recommendation_id": "x", "feedback": "like"})
    assert resp.status_code == 401


def test_resources_require_login():
    c = TestClient(app)
    assert c.get("/resources/trending").status_code == 401
    assert c.post("/resources/r1/view").status_code == 401


def test_analytics_requires_admin():
    _login_user(client)
    resp = client.get("/analytics")
    assert resp.status_code == 403


def test_analytics_allowed_for_admin():
    _login_admin(client)
    resp = client.get("/analytics")
    assert resp.status_code == 200


def test_feedback_stats_requires_admin():
    c = TestClient(app)
    _login_user(c)
    assert c.get("/feedback/stats").status_code == 403


def test_cache_stats_requires_admin():
    c = TestClient(app)
    _login_user(c)
    assert c.get("/cache/stats").status_code == 403


def test_health_is_public():
    c = TestClient(app)
    assert c.get("/health").status_code == 200
