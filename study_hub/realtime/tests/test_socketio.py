import logging
from datetime import timedelta

import pytest
from asgiref.sync import async_to_sync
from rest_framework_simplejwt.tokens import AccessToken

from study_hub.realtime import socketio as rt
from study_hub.realtime.rooms import RoomKind
from study_hub.realtime.rooms import room_for_class
from tests.factories import make_course
from tests.factories import make_group
from tests.factories import make_university
from tests.factories import make_user


@pytest.fixture
def rooms(monkeypatch):
    """Stub the Socket.IO room calls and start from an empty registry."""
    calls = []

    async def enter_room(sid, room, namespace=None):
        calls.append(("enter", sid, room))

    async def leave_room(sid, room, namespace=None):
        calls.append(("leave", sid, room))

    async def save_session(sid, session, namespace=None):
        calls.append(("session", sid, session))

    monkeypatch.setattr(rt.sio, "enter_room", enter_room)
    monkeypatch.setattr(rt.sio, "leave_room", leave_room)
    monkeypatch.setattr(rt.sio, "save_session", save_session)
    monkeypatch.setattr(rt, "connections", rt.ConnectionRegistry())
    return calls


def _connect(sid, environ=None, auth=None):
    return async_to_sync(rt.connect)(sid, environ or {}, auth)


def test_extract_token_from_asgi_query():
    environ = {"asgi.scope": {"query_string": b"EIO=4&token=abc"}}
    assert rt._extract_token(environ, None) == "abc"  # noqa: SLF001


def test_extract_token_from_wsgi_query_and_auth():
    assert rt._extract_token({"QUERY_STRING": "token=xyz"}, None) == "xyz"  # noqa: SLF001
    assert rt._extract_token({}, {"token": "from-auth"}) == "from-auth"  # noqa: SLF001
    assert rt._extract_token({}, {"token": ""}) is None  # noqa: SLF001
    assert rt._extract_token({}, None) is None  # noqa: SLF001


def test_anonymous_connect_allowed_by_default(rooms, settings):
    settings.REALTIME_REQUIRE_AUTH = False
    _connect("anon")
    conn = rt.connections.get("anon")
    assert conn is not None
    assert not conn.is_authenticated


def test_anonymous_connect_refused_when_auth_required(rooms, settings):
    settings.REALTIME_REQUIRE_AUTH = True
    with pytest.raises(ConnectionRefusedError, match="unauthorized"):
        _connect("anon")
    assert rt.connections.get("anon") is None


@pytest.mark.django_db(transaction=True)
def test_connect_with_access_token(rooms):
    university = make_university()
    user = make_user(university)
    token = str(AccessToken.for_user(user))

    _connect("s1", {"QUERY_STRING": f"token={token}"})

    conn = rt.connections.get("s1")
    assert conn.user_id == user.pk
    assert conn.university_id == university.pk
    assert ("session", "s1", {"user_id": user.pk}) in rooms


@pytest.mark.django_db(transaction=True)
def test_connect_with_bad_tokens_is_refused(rooms):
    user = make_user(make_university())
    expired = AccessToken.for_user(user)
    expired.set_exp(lifetime=-timedelta(minutes=5))

    with pytest.raises(ConnectionRefusedError, match="jwt_expired"):
        _connect("s1", auth={"token": str(expired)})
    with pytest.raises(ConnectionRefusedError):
        _connect("s2", auth={"token": "not-a-jwt"})
    assert len(rt.connections) == 0


def test_subscribe_and_unsubscribe(rooms):
    _connect("s1")
    joined = async_to_sync(rt.subscribe)("s1", RoomKind.CLASS, {"id": 4})
    assert joined == {"ok": True, "room": "class:4"}
    assert rt.connections.get("s1").rooms == frozenset({room_for_class(4)})

    left = async_to_sync(rt.unsubscribe)("s1", RoomKind.CLASS, "4")
    assert left == {"ok": True, "room": "class:4"}
    assert rooms == [("enter", "s1", "class:4"), ("leave", "s1", "class:4")]


@pytest.mark.parametrize("payload", [None, "x", 0, {"id": -2}])
def test_subscribe_rejects_invalid_ids(rooms, payload):
    _connect("s1")
    result = async_to_sync(rt.subscribe)("s1", RoomKind.STUDY_GROUP, payload)
    assert result == {"ok": False, "error": "invalid_id"}
    assert rooms == []


def test_disconnect_drops_subscriptions(rooms):
    _connect("s1")
    async_to_sync(rt.subscribe)("s1", RoomKind.UNIVERSITY, 1)
    async_to_sync(rt.disconnect)("s1")
    assert rt.connections.get("s1") is None


def test_join_handlers_are_registered():
    handlers = rt.sio.handlers["/"]
    for event in ("join-university", "join-class", "join-study-group"):
        assert event in handlers
    for event in ("leave-university", "leave-class", "leave-study-group"):
        assert event in handlers


@pytest.mark.django_db(transaction=True)
def test_enforced_room_access(rooms, settings, emitted):
    settings.REALTIME_ENFORCE_ROOM_ACCESS = True
    university = make_university()
    user = make_user(university)
    other = make_user(make_university())
    course = make_course(university, user)
    group = make_group(course, user)

    for sid, member in (("mine", user), ("theirs", other)):
        token = str(AccessToken.for_user(member))
        _connect(sid, auth={"token": token})

    subscribe = async_to_sync(rt.subscribe)
    assert subscribe("mine", RoomKind.CLASS, course.pk)["ok"] is True
    assert subscribe("mine", RoomKind.STUDY_GROUP, group.pk)["ok"] is True
    assert subscribe("mine", RoomKind.UNIVERSITY, university.pk)["ok"] is True

    refused = subscribe("theirs", RoomKind.STUDY_GROUP, group.pk)
    assert refused == {
        "ok": False,
        "error": "forbidden",
        "room": f"studyGroup:{group.pk}",
    }
    assert subscribe("theirs", RoomKind.CLASS, course.pk)["ok"] is False
    _connect("anon")
    assert subscribe("anon", RoomKind.UNIVERSITY, university.pk)["ok"] is False


def test_emit_event_to_room(monkeypatch):
    sent = []

    async def emit(event, payload, room=None, **kwargs):
        sent.append((event, payload, room))

    monkeypatch.setattr(rt.sio, "emit", emit)
    assert rt.emit_event_to_room(room_for_class(2), "group-deleted", {"id": 1}) is True
    assert sent == [("group-deleted", {"id": 1}, "class:2")]


def test_emit_failure_is_logged_not_raised(monkeypatch, caplog):
    async def emit(event, payload, room=None, **kwargs):
        msg = "redis down"
        raise ConnectionError(msg)

    monkeypatch.setattr(rt.sio, "emit", emit)
    with caplog.at_level(logging.ERROR, logger="study_hub.realtime.socketio"):
        ok = rt.emit_event_to_room(room_for_class(2), "group-deleted", {"id": 1})
    assert ok is False
    assert "Realtime emit failed" in caplog.text
