from __future__ import annotations

from fastapi.testclient import TestClient

from studyhub.analytics.feedback import (
    clear_feedback,
    get_all_feedback,
    get_feedback,
    record_feedback,
)
from studyhub.app import app
from studyhub.recommendations.models import FeedbackKind

client = TestClient(app)


def _login_user(c):
    c.post("/auth/login", json={"username": "student", "password": "student123"})


def _login_admin(c):
    c.post("/auth/login", json={"username": "admin", "password": "admin123"})


def test_latest_feedback_wins():
    clear_feedback()
    record_feedback("student", "trending-r1", FeedbackKind.like)
    record_feedback("student", "trending-r1", "not_helpful")
    assert get_feedback("student", "trending-r1") == FeedbackKind.not_helpful
    assert len(get_all_feedback()) == 1


def test_feedback_is_per_user():
    clear_feedback()
    record_feedback("student", "study-path-0", FeedbackKind.helpful)
    record_feedback("priya", "study-path-0", FeedbackKind.dislike)
    assert get_feedback("student", "study-path-0") == FeedbackKind.helpful
    assert get_feedback("priya", "study-path-0") == FeedbackKind.dislike
    assert get_feedback("arjun", "study-path-0") is None


def test_feedback_endpoint_records_and_overwrites():
    clear_feedback()
    _login_user(client)
    resp = client.post("/recommendations/feedback", json={
        "recommendation_id": "peer-r3",
        "feedback": "like",
    })
    assert resp.status_code == 200
    assert resp.json()["status"] == "recorded"

    client.post("/recommendations/feedback", json={
        "recommendation_id": "peer-r3",
        "feedback": "dislike",
    })
    resp = client.get("/recommendations/feedback/peer-r3")
    assert resp.status_code == 200
    assert resp.json()["feedback"] == "dislike"


def test_feedback_lookup_missing():
    clear_feedback()
    _login_user(client)
    resp = client.get("/recommendations/feedback/unknown-id")
    assert resp.status_code == 404


def test_feedback_validation_rejects_bad_values():
    _login_user(client)
    resp = client.post("/recommendations/feedback", json={
        "recommendation_id": "peer-r3",
        "feedback": "meh",
    })
    assert resp.status_code == 422
    resp = client.post("/recommendations/feedback", json={
        "recommendation_id": "",
        "feedback": "like",
    })
    assert resp.status_code == 422


def test_feedback_stats():
    clear_feedback()
    _login_user(client)
    client.post("/recommendations/feedback", json={"recommendation_id": "a", "feedback": "like"})
    client.post("/recommendations/feedback", json={"recommendation_id": "b", "feedback": "helpful"})
    client.post("/recommendations/feedback", json={"recommendation_id": "c", "feedback": "dislike"})
    _login_admin(client)
    resp = client.get("/feedback/stats")
    body = resp.json()
    assert body["total"] == 3
    assert body["positive"] == 2
    assert body["negative"] == 1
    assert body["by_kind"]["helpful"] == 1
    assert body["satisfaction_rate"] == 66.7
