from http import HTTPStatus
from unittest import mock

import pytest
from django.db import connection as dj_conn


class DummyDbError(Exception):
    """Synthetic DB error for testing."""


@pytest.mark.django_db
def test_health_ok_without_realtime_redis(client, settings):
    settings.REALTIME_REDIS_URL = ""
    resp = client.get("/health/")
    assert resp.status_code == HTTPStatus.OK
    data = resp.json()
    assert data["status"] == "ok"
    assert data["components"]["db"]["ok"] is True
    assert "redis" not in data["components"]


@pytest.mark.django_db
def test_health_degraded_when_redis_fails(client, settings):
    settings.REALTIME_REDIS_URL = "redis://localhost:6379/0"
    with mock.patch(
        "config.health.redis.Redis.ping",
        side_effect=TimeoutError("redis timeout"),
    ):
        resp = client.get("/health/")
    assert resp.status_code == HTTPStatus.SERVICE_UNAVAILABLE
    data = resp.json()
    assert data["components"]["redis"]["ok"] is False
    assert data["status"] == "degraded"


@pytest.mark.django_db
def test_health_ok_when_redis_answers(client, settings):
    settings.REALTIME_REDIS_URL = "redis://localhost:6379/0"
    with mock.patch("config.health.redis.Redis.ping", return_value=True):
        resp = client.get("/health/")
    assert resp.status_code == HTTPStatus.OK
    assert resp.json()["components"]["redis"] == {"ok": True}


@pytest.mark.django_db
def test_health_down_when_db_fails(client, settings, monkeypatch):
    settings.REALTIME_REDIS_URL = ""
    msg = "db down"

    def raise_cursor():
        raise DummyDbError(msg)

    monkeypatch.setattr(dj_conn, "cursor", raise_cursor, raising=True)
    resp = client.get("/health/")
    assert resp.status_code == HTTPStatus.SERVICE_UNAVAILABLE
    data = resp.json()
    assert data["components"]["db"]["ok"] is False
    assert data["status"] == "down"
