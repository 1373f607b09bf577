import pytest
from asgiref.sync import async_to_sync

from study_hub.realtime.rooms import Connection
from study_hub.realtime.rooms import ConnectionRegistry
from study_hub.realtime.rooms import RoomId
from study_hub.realtime.rooms import RoomKind
from study_hub.realtime.rooms import coerce_room_id
from study_hub.realtime.rooms import room_for_class
from study_hub.realtime.rooms import room_for_study_group
from study_hub.realtime.rooms import room_for_university


class FakeServer:
    def __init__(self):
        self.calls = []

    async def enter_room(self, sid, room, namespace=None):
        self.calls.append(("enter", sid, room))

    async def leave_room(self, sid, room, namespace=None):
        self.calls.append(("leave", sid, room))


def test_room_names():
    assert str(room_for_university(3)) == "university:3"
    assert str(room_for_class("7")) == "class:7"
    assert str(room_for_study_group(9)) == "studyGroup:9"


def test_room_parse_round_trip():
    room = RoomId.parse("studyGroup:12")
    assert room == RoomId(RoomKind.STUDY_GROUP, 12)
    with pytest.raises(ValueError):  # noqa: PT011
        RoomId.parse("office:1")


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (5, 5),
        ("5", 5),
        (" 8 ", 8),
        ({"id": 4}, 4),
        ({"id": "4"}, 4),
        (0, None),
        (-1, None),
        (True, None),
        (None, None),
        ("abc", None),
        ({}, None),
        (2.5, None),
    ],
)
def test_coerce_room_id(value, expected):
    assert coerce_room_id(value) == expected


def test_connection_subscribe_is_idempotent():
    server = FakeServer()
    conn = Connection(sid="s1", user_id=1, university_id=1)
    room = room_for_class(1)

    assert async_to_sync(conn.subscribe)(server, room) is True
    assert async_to_sync(conn.subscribe)(server, room) is False
    assert conn.rooms == frozenset({room})
    assert server.calls == [("enter", "s1", "class:1")]

    assert async_to_sync(conn.unsubscribe)(server, room) is True
    assert async_to_sync(conn.unsubscribe)(server, room) is False
    assert conn.rooms == frozenset()
    assert server.calls[-1] == ("leave", "s1", "class:1")


def test_connections_in_different_rooms_are_isolated():
    server = FakeServer()
    registry = ConnectionRegistry()
    a = registry.add(Connection(sid="a"))
    b = registry.add(Connection(sid="b"))
    async_to_sync(a.subscribe)(server, room_for_class(1))
    async_to_sync(b.subscribe)(server, room_for_class(2))

    assert registry.subscribers(room_for_class(1)) == ["a"]
    assert registry.subscribers(room_for_class(2)) == ["b"]
    assert registry.subscribers(room_for_study_group(1)) == []


def test_registry_discard_forgets_rooms():
    server = FakeServer()
    registry = ConnectionRegistry()
    conn = registry.get_or_create("s1")
    assert registry.get_or_create("s1") is conn
    async_to_sync(conn.subscribe)(server, room_for_university(1))

    assert registry.discard("s1") is conn
    assert conn.rooms == frozenset()
    assert len(registry) == 0
    assert registry.discard("s1") is None
    assert registry.subscribers(room_for_university(1)) == []
