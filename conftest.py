from __future__ import annotations

import pytest
from rest_framework.test import APIClient

from tests.factories import make_course
from tests.factories import make_university
from tests.factories import make_user


@pytest.fixture
def university(db):
    return make_university()


@pytest.fixture
def other_university(db):
    return make_university()


@pytest.fixture
def user(university):
    return make_user(university)


@pytest.fixture
def classmate(university):
    return make_user(university)


@pytest.fixture
def outsider(other_university):
    return make_user(other_university)


@pytest.fixture
def course(university, user):
    return make_course(university, user)


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def client_for():
    """Build an API client authenticated as the given user."""

    def _build(user) -> APIClient:
        client = APIClient()
        client.force_authenticate(user=user)
        return client

    return _build


@pytest.fixture
def emitted(monkeypatch):
    """Record realtime emits as ``(room, event, payload)`` instead of sending."""
    calls: list[tuple[str, str, object]] = []

    def fake_emit(room, event, payload):
        calls.append((str(room), event, payload))
        return True

    monkeypatch.setattr("study_hub.realtime.socketio.emit_event_to_room", fake_emit)
    return calls
