"""Room naming and per-connection subscription state.

Room names are built here and nowhere else. Each connection owns the set of
rooms it subscribed to; :meth:`Connection.subscribe` and
:meth:`Connection.unsubscribe` are the only ways that set changes.
"""

from __future__ import annotations

from dataclasses import dataclass
from dataclasses import field
from enum import Enum
from typing import Any
from typing import Protocol


class RoomKind(str, Enum):
    UNIVERSITY = "university"
    CLASS = "class"
    STUDY_GROUP = "studyGroup"


@dataclass(frozen=True)
class RoomId:
    kind: RoomKind
    id: int

    def __str__(self) -> str:
        return f"{self.kind.value}:{self.id}"

    @classmethod
    def parse(cls, value: str) -> RoomId:
        kind, _, raw_id = value.partition(":")
        return cls(RoomKind(kind), int(raw_id))


def room_for_university(university_id: int) -> RoomId:
    return RoomId(RoomKind.UNIVERSITY, int(university_id))


def room_for_class(course_id: int) -> RoomId:
    return RoomId(RoomKind.CLASS, int(course_id))


def room_for_study_group(group_id: int) -> RoomId:
    return RoomId(RoomKind.STUDY_GROUP, int(group_id))


# Client -> server events. `join-*` subscribes, `leave-*` unsubscribes.
SUBSCRIBE_EVENTS = {
    "join-university": RoomKind.UNIVERSITY,
    "join-class": RoomKind.CLASS,
    "join-study-group": RoomKind.STUDY_GROUP,
}
UNSUBSCRIBE_EVENTS = {
    "leave-university": RoomKind.UNIVERSITY,
    "leave-class": RoomKind.CLASS,
    "leave-study-group": RoomKind.STUDY_GROUP,
}


def coerce_room_id(value: Any) -> int | None:
    """Accept ``12``, ``"12"`` or ``{"id": 12}`` from clients."""
    if isinstance(value, dict):
        value = value.get("id")
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, int):
        return value if value > 0 else None
    if isinstance(value, str) and value.strip().isdigit():
        parsed = int(value.strip())
        return parsed if parsed > 0 else None
    return None


class RoomServer(Protocol):
    async def enter_room(self, sid: str, room: str, namespace: str | None = None): ...

    async def leave_room(self, sid: str, room: str, namespace: str | None = None): ...


@dataclass
class Connection:
    sid: str
    user_id: int | None = None
    university_id: int | None = None
    _rooms: set[RoomId] = field(default_factory=set, repr=False)

    @property
    def rooms(self) -> frozenset[RoomId]:
        return frozenset(self._rooms)

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None

    async def subscribe(self, server: RoomServer, room: RoomId) -> bool:
        """Join ``room``. Returns False when already subscribed."""
        if room in self._rooms:
            return False
        await server.enter_room(self.sid, str(room))
        self._rooms.add(room)
        return True

    async def unsubscribe(self, server: RoomServer, room: RoomId) -> bool:
        if room not in self._rooms:
            return False
        await server.leave_room(self.sid, str(room))
        self._rooms.discard(room)
        return True

    def forget_rooms(self) -> None:
        # The Socket.IO manager already removed the sid from every room.
        self._rooms.clear()


class ConnectionRegistry:
    """Live connections of this process, keyed by Socket.IO sid."""

    def __init__(self) -> None:
        self._connections: dict[str, Connection] = {}

    def __len__(self) -> int:
        return len(self._connections)

    def add(self, connection: Connection) -> Connection:
        self._connections[connection.sid] = connection
        return connection

    def get(self, sid: str) -> Connection | None:
        return self._connections.get(sid)

    def get_or_create(self, sid: str) -> Connection:
        conn = self._connections.get(sid)
        if conn is None:
            conn = self.add(Connection(sid=sid))
        return conn

    def discard(self, sid: str) -> Connection | None:
        conn = self._connections.pop(sid, None)
        if conn is not None:
            conn.forget_rooms()
        return conn

    def subscribers(self, room: RoomId) -> list[str]:
        return [sid for sid, conn in self._connections.items() if room in conn.rooms]
