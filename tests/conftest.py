"""Shared fixtures for backend tests."""

import pytest
from fastapi.testclient import TestClient

from portfolio.api import create_app
from portfolio.config import Config


class RecordingSender:
    """Email sender that keeps messages in memory."""

    def __init__(self, error: Exception = None):
        self.sent = []
        self.error = error

    def send(self, subject: str, recipient: str, body: str) -> None:
        if self.error is not None:
            raise self.error
        self.sent.append((subject, recipient, body))


@pytest.fixture()
def config():
    return Config(
        contact_recipient="owner@example.com",
        email_delay_seconds=0,
        success_display_seconds=0.05,
        request_timeout=1.0,
    )


@pytest.fixture()
def sender():
    return RecordingSender()


@pytest.fixture()
def client(config, sender):
    with TestClient(create_app(config, sender)) as c:
        yield c


@pytest.fixture()
def valid_form():
    return {
        "firstName": "A",
        "lastName": "B",
        "email": "a@b.com",
        "message": "hi",
    }
