"""
Tests for POST /api/recommend and GET /health.

Tests cover:
- Happy path: clean reply -> 200 success
- Degraded path: record missing a field -> 200 warning
- Failure paths: missing input -> 400, bad reply / AI failure -> 500
- Request body aliases and schema validation
"""

import json

import pytest
from fastapi.testclient import TestClient

from conftest import FakeTextGenerator, make_doctor
from doctor_finder.agents.doctor.generator import get_text_generator
from doctor_finder.main import app


@pytest.fixture
def client():
    """Create test client for FastAPI app."""
    return TestClient(app)


@pytest.fixture
def override_generator():
    """Install a FakeTextGenerator as the text generator dependency."""
    def _install(generator):
        app.dependency_overrides[get_text_generator] = lambda: generator
        return generator

    yield _install

    # Clean up after test
    app.dependency_overrides.clear()


class TestRecommendEndpoint:
    """Tests for POST /api/recommend."""

    def test_happy_path_returns_success(self, client, override_generator, complete_doctors):
        generator = override_generator(FakeTextGenerator(reply=json.dumps(complete_doctors)))

        response = client.post(
            "/api/recommend",
            json={"symptoms": "fever and cough", "location": "Mumbai"},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "success"
        assert body["error_code"] is None
        assert len(body["recommendation"]) == 3
        assert body["recommendation"][0]["name"] == complete_doctors[0]["name"]
        assert set(body["user_feedback"]) == {"disclaimer", "next_steps"}
        assert "Mumbai" in generator.prompts[0]

    def test_user_location_alias_accepted(self, client, override_generator, complete_doctors):
        generator = override_generator(FakeTextGenerator(reply=json.dumps(complete_doctors)))

        response = client.post(
            "/api/recommend",
            json={"symptoms": "back pain", "userLocation": "Bengaluru"},
        )

        assert response.status_code == 200
        assert "near: Bengaluru" in generator.prompts[0]

    def test_validation_issues_return_200_warning(self, client, override_generator, complete_doctors):
        del complete_doctors[2]["phone"]
        override_generator(FakeTextGenerator(reply=json.dumps(complete_doctors)))

        response = client.post(
            "/api/recommend",
            json={"symptoms": "fever", "location": "Mumbai"},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "warning"
        assert len(body["recommendation"]) == 3
        assert body["debug"]["validation_results"][2]["missing_keys"] == ["phone"]

    @pytest.mark.parametrize("payload", [
        {},
        {"symptoms": "fever"},
        {"location": "Mumbai"},
        {"symptoms": "", "location": "Mumbai"},
    ])
    def test_missing_fields_return_400(self, client, override_generator, payload):
        generator = override_generator(FakeTextGenerator(reply="[]"))

        response = client.post("/api/recommend", json=payload)

        assert response.status_code == 400
        body = response.json()
        assert body["status"] == "error"
        assert body["error_code"] == "invalid_request"
        assert body["recommendation"] is None
        assert "userLocation" in body["user_feedback"]["next_steps"]
        assert generator.prompts == []

    def test_long_inputs_accepted(self, client, override_generator, complete_doctors):
        """No length limit is placed on request text."""
        generator = override_generator(FakeTextGenerator(reply=json.dumps(complete_doctors)))

        response = client.post(
            "/api/recommend",
            json={"symptoms": "a" * 2001, "location": "M" * 301},
        )

        assert response.status_code == 200
        assert response.json()["status"] == "success"
        assert "a" * 2001 in generator.prompts[0]

    def test_lone_surrogate_reply_returns_500_envelope(self, client, override_generator):
        reply = json.dumps([make_doctor()]).replace("General Medicine", "Gen\\ud800")
        override_generator(FakeTextGenerator(reply=reply))

        response = client.post(
            "/api/recommend",
            json={"symptoms": "fever", "location": "Mumbai"},
        )

        assert response.status_code == 500
        body = response.json()
        assert body["status"] == "error"
        assert body["error_code"] == "malformed_reply"
        assert body["recommendation"] is None
        assert "user_feedback" in body

    def test_malformed_reply_returns_500(self, client, override_generator):
        override_generator(FakeTextGenerator(reply="hello"))

        response = client.post(
            "/api/recommend",
            json={"symptoms": "fever", "location": "Mumbai"},
        )

        assert response.status_code == 500
        body = response.json()
        assert body["error_code"] == "malformed_reply"
        assert body["debug"]["gemini_raw_response"] == "hello"

    def test_upstream_failure_returns_500(self, client, override_generator):
        override_generator(FakeTextGenerator(error=RuntimeError("API key not valid")))

        response = client.post(
            "/api/recommend",
            json={"symptoms": "fever", "location": "Mumbai"},
        )

        assert response.status_code == 500
        body = response.json()
        assert body["error_code"] == "upstream_failure"
        assert body["debug"]["error_details"] == "API key not valid"

    def test_unconfigured_generator_returns_500(self, client, override_generator):
        override_generator(None)

        response = client.post(
            "/api/recommend",
            json={"symptoms": "fever", "location": "Mumbai"},
        )

        assert response.status_code == 500
        assert response.json()["error_code"] == "upstream_failure"

    def test_non_string_symptoms_return_422(self, client, override_generator):
        override_generator(FakeTextGenerator(reply="[]"))

        response = client.post(
            "/api/recommend",
            json={"symptoms": ["fever"], "location": "Mumbai"},
        )

        assert response.status_code == 422
        assert response.json()["error"] == "validation_error"


class TestHealthEndpoint:
    """Tests for GET /health."""

    def test_health_ok(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"
