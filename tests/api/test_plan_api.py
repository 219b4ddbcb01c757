"""Tests for the plan adjustment HTTP routes."""

import pytest
from fastapi.testclient import TestClient

from mentor.main import app

HEADERS = {"X-User-Id": "coach-client"}


@pytest.fixture
def client(db_session):
    """TestClient bound to the in-memory database."""
    return TestClient(app)


@pytest.fixture
def converted_client(client):
    """Client whose user has converted from a beginner preview."""
    client.post(
        "/api/preonboarding/message",
        headers=HEADERS,
        json={
            "message": "",
            "patch": {
                "goal": "maintain",
                "experience_level": "beginner",
                "body_weight_kg": 70,
                "diet": "regular",
                "schedule": {"days_per_week": 3},
            },
        },
    )
    client.post("/api/preonboarding/convert", headers=HEADERS, json={"plan_type": "SUBSCRIBED"})
    return client


def test_no_plan_returns_404(client):
    """Test adjustments without a current plan return 404."""
    assert client.post("/api/plan/progression", headers=HEADERS).status_code == 404
    assert client.get("/api/plan/current", headers=HEADERS).status_code == 404


def test_progression_creates_next_version(converted_client):
    """Test progression stores version 2 with one extra set on main lifts."""
    response = converted_client.post("/api/plan/progression", headers=HEADERS)

    assert response.status_code == 200
    assert response.json()["version"] == 2

    current = converted_client.get("/api/plan/current", headers=HEADERS).json()
    monday = current["training"]["days"][0]
    assert monday["exercises"][0]["sets"] == 4
    assert monday["exercises"][1]["sets"] == 3


def test_swap_falls_back_to_training_day(converted_client):
    """Test swapping on a rest day lands on the first training day."""
    response = converted_client.post(
        "/api/plan/swap",
        headers=HEADERS,
        json={"day": "Sun", "from_name": "Bench Press", "to_name": "Push-up"},
    )

    assert response.status_code == 200
    assert "Mon" in response.json()["summary"]
    monday = converted_client.get("/api/plan/current", headers=HEADERS).json()["training"]["days"][0]
    assert [e["name"] for e in monday["exercises"]] == ["Back Squat", "Push-up", "Lat Pulldown"]


def test_injuries_not_applicable(converted_client):
    """Test injuries without substitutions report applied=false."""
    response = converted_client.post("/api/plan/injuries", headers=HEADERS, json={"injuries": ["shoulder"]})

    assert response.status_code == 200
    assert response.json()["applied"] is False
    assert response.json()["version"] is None


def test_knee_injury_swaps(converted_client):
    """Test knee injury swaps Back Squat in the stored plan."""
    response = converted_client.post("/api/plan/injuries", headers=HEADERS, json={"injuries": ["knee"]})

    assert response.json()["applied"] is True
    monday = converted_client.get("/api/plan/current", headers=HEADERS).json()["training"]["days"][0]
    assert monday["exercises"][0]["name"] == "Leg Press"


def test_nutrition_kcal_clamped(converted_client):
    """Test explicit kcal is clamped and macros are kept."""
    response = converted_client.post("/api/plan/nutrition/kcal", headers=HEADERS, json={"kcal": 900})

    assert response.json()["summary"] == "Calories set to 1200"
    nutrition = converted_client.get("/api/plan/current", headers=HEADERS).json()["nutrition"]
    assert nutrition["kcal"] == 1200
    assert nutrition["protein_grams"] == 140
    assert nutrition["version"] == 2


def test_nutrition_from_profile(converted_client):
    """Test recomputing nutrition from the stored profile."""
    response = converted_client.post("/api/plan/nutrition/from-profile", headers=HEADERS)

    assert response.status_code == 200
    assert response.json()["version"] == 2
    nutrition = converted_client.get("/api/plan/current", headers=HEADERS).json()["nutrition"]
    assert nutrition["kcal"] == 2100


def test_days_per_week_validation(converted_client):
    """Test out-of-range frequency is rejected."""
    assert converted_client.post("/api/plan/days-per-week", headers=HEADERS, json={"days_per_week": 9}).status_code == 422
    assert converted_client.post("/api/plan/days-per-week", headers=HEADERS, json={"days_per_week": 4}).json()["version"] == 2
