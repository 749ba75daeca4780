"""Tests for POST /api/contact and GET /api/experience."""

import pytest
from fastapi.testclient import TestClient

from portfolio.api import SEND_FAILED_MESSAGE, create_app
from portfolio.email_client import EmailDeliveryError

from conftest import RecordingSender


class TestContact:
    def test_accepts_valid_submission(self, client, sender, valid_form):
        response = client.post("/api/contact", json=valid_form)

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["message"]
        assert len(sender.sent) == 1

    def test_phone_is_optional(self, client, valid_form):
        assert "phone" not in valid_form
        response = client.post("/api/contact", json=valid_form)
        assert response.status_code == 200

    def test_phone_is_included_in_email(self, client, sender, valid_form):
        valid_form["phone"] = "+1 555 0100"
        client.post("/api/contact", json=valid_form)

        subject, recipient, body = sender.sent[0]
        assert subject == "New Contact Form Submission from A B"
        assert recipient == "owner@example.com"
        assert "+1 555 0100" in body

    def test_missing_message_is_rejected(self, client, sender, valid_form):
        del valid_form["message"]
        response = client.post("/api/contact", json=valid_form)

        assert response.status_code == 400
        body = response.json()
        assert body["error"]
        assert body["fields"] == ["message"]
        assert sender.sent == []

    @pytest.mark.parametrize("field", ["firstName", "lastName", "email", "message"])
    @pytest.mark.parametrize("value", ["", None, 0])
    def test_empty_required_field_is_rejected(self, client, valid_form, field, value):
        valid_form[field] = value
        response = client.post("/api/contact", json=valid_form)

        assert response.status_code == 400
        assert field in response.json()["fields"]

    @pytest.mark.parametrize("field", ["firstName", "lastName", "email", "message"])
    def test_whitespace_counts_as_present(self, client, valid_form, field):
        valid_form[field] = "   "
        response = client.post("/api/contact", json=valid_form)
        assert response.status_code == 200

    def test_numeric_phone_is_accepted(self, client, sender, valid_form):
        valid_form["phone"] = 5551234
        response = client.post("/api/contact", json=valid_form)

        assert response.status_code == 200
        _, _, body = sender.sent[0]
        assert "5551234" in body

    def test_phone_null_is_accepted(self, client, sender, valid_form):
        valid_form["phone"] = None
        assert client.post("/api/contact", json=valid_form).status_code == 200
        assert "Not provided" in sender.sent[0][2]

    def test_non_json_body_is_rejected(self, client):
        response = client.post(
            "/api/contact", content=b"not json", headers={"Content-Type": "application/json"}
        )
        assert response.status_code == 400
        assert response.json()["error"]

    def test_array_body_is_rejected(self, client):
        response = client.post("/api/contact", json=["A", "B"])
        assert response.status_code == 400

    def test_deeply_nested_body_is_rejected(self, client, sender):
        depth = 200000
        response = client.post(
            "/api/contact",
            content=b"[" * depth + b"]" * depth,
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.headers["content-type"].startswith("application/json")
        assert response.json()["error"]
        assert sender.sent == []

    def test_send_failure_returns_500(self, config, valid_form):
        failing = RecordingSender(error=EmailDeliveryError("provider down"))
        with TestClient(create_app(config, failing)) as c:
            response = c.post("/api/contact", json=valid_form)

        assert response.status_code == 500
        assert response.json() == {"error": SEND_FAILED_MESSAGE}

    def test_requests_are_independent(self, client, sender, valid_form):
        for _ in range(3):
            assert client.post("/api/contact", json=valid_form).status_code == 200
        assert len(sender.sent) == 3


class TestExperience:
    def test_summary(self, client):
        response = client.get("/api/experience")

        assert response.status_code == 200
        body = response.json()
        assert body["total"] == body["years"] + 0.5
        assert body["text"] == f"{body['years']}+ Years"
