"""Global Socket.IO server for the frontend.

Clients subscribe explicitly with ``join-university`` / ``join-class`` /
``join-study-group`` (payload: the id) and unsubscribe with the matching
``leave-*`` event or by disconnecting. Server events are published from
``study_hub.realtime.events`` after the database transaction commits.

Current frontend convention:
- URL base: ws://<host>:8000
- Socket.IO path: /ws/socket.io/
- Auth (optional unless REALTIME_REQUIRE_AUTH): `query.token` or `auth.token`
  (JWT access token)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any
from urllib.parse import parse_qs

import socketio
from asgiref.sync import async_to_sync
from channels.db import database_sync_to_async
from django.conf import settings
from rest_framework.exceptions import AuthenticationFailed
from rest_framework_simplejwt.authentication import JWTAuthentication
from rest_framework_simplejwt.exceptions import TokenError

from study_hub.realtime.rooms import SUBSCRIBE_EVENTS
from study_hub.realtime.rooms import UNSUBSCRIBE_EVENTS
from study_hub.realtime.rooms import Connection
from study_hub.realtime.rooms import ConnectionRegistry
from study_hub.realtime.rooms import RoomId
from study_hub.realtime.rooms import RoomKind
from study_hub.realtime.rooms import coerce_room_id

logger = logging.getLogger(__name__)


def _build_client_manager() -> socketio.AsyncManager | None:
    url = getattr(settings, "REALTIME_REDIS_URL", "")
    if not url:
        return None
    return socketio.AsyncRedisManager(url)


sio = socketio.AsyncServer(
    async_mode="asgi",
    cors_allowed_origins=settings.REALTIME_CORS_ALLOWED_ORIGINS,
    client_manager=_build_client_manager(),
    logger=False,
    engineio_logger=False,
)

connections = ConnectionRegistry()


@dataclass(frozen=True)
class UserRealtimeContext:
    user_id: int
    university_id: int | None


@database_sync_to_async
def _get_user_context_from_access_token(token: str) -> UserRealtimeContext:
    jwt_auth = JWTAuthentication()
    validated = jwt_auth.get_validated_token(token)
    user = jwt_auth.get_user(validated)
    return UserRealtimeContext(
        user_id=int(user.id),
        university_id=getattr(user, "university_id", None),
    )


def _extract_token(environ: dict[str, Any], auth: Any | None) -> str | None:
    """Extract JWT token from Socket.IO environ/auth.

    Handles python-socketio environ shapes across ASGI/WSGI servers.
    """

    scope: Any = environ
    if isinstance(environ, dict) and "asgi.scope" in environ:
        inner = environ.get("asgi.scope")
        if isinstance(inner, dict):
            scope = inner

    query_string: str | bytes = ""
    if isinstance(scope, dict) and "query_string" in scope:
        query_string = scope.get("query_string", b"")
    elif isinstance(scope, dict) and "QUERY_STRING" in scope:
        query_string = scope.get("QUERY_STRING", "")

    if isinstance(query_string, (bytes, bytearray)):
        query_string = query_string.decode(errors="ignore")

    token = parse_qs(str(query_string)).get("token", [None])[0]
    if isinstance(token, str) and token:
        return token

    # Allow `auth: { token }` as fallback.
    if isinstance(auth, dict):
        auth_token = auth.get("token")
        if isinstance(auth_token, str) and auth_token:
            return auth_token

    return None


@sio.event
async def connect(sid: str, environ: dict[str, Any], auth: Any | None = None):
    token = _extract_token(environ, auth)
    if not token:
        if settings.REALTIME_REQUIRE_AUTH:
            msg = "unauthorized"
            raise ConnectionRefusedError(msg)
        connections.add(Connection(sid=sid))
        return

    try:
        ctx = await _get_user_context_from_access_token(token)
    except (TokenError, AuthenticationFailed) as exc:
        # InvalidToken wraps the TokenError messages in its detail.
        if "expired" in str(exc).lower():
            msg = "jwt_expired"
            raise ConnectionRefusedError(msg) from exc
        msg = "unauthorized"
        raise ConnectionRefusedError(msg) from exc

    await sio.save_session(sid, {"user_id": ctx.user_id})
    connections.add(
        Connection(sid=sid, user_id=ctx.user_id, university_id=ctx.university_id),
    )


@sio.event
async def disconnect(sid: str, reason: Any = None):
    connections.discard(sid)


@database_sync_to_async
def _may_subscribe(conn: Connection, room: RoomId) -> bool:
    # Imported lazily so the socket server can load before the app registry.
    from study_hub.courses.models import Course
    from study_hub.groups.models import Membership

    if not conn.is_authenticated:
        return False
    if room.kind is RoomKind.UNIVERSITY:
        return conn.university_id == room.id
    if room.kind is RoomKind.CLASS:
        return Course.objects.filter(
            pk=room.id,
            university_id=conn.university_id,
        ).exists()
    return Membership.objects.filter(
        study_group_id=room.id,
        user_id=conn.user_id,
    ).exists()


async def subscribe(sid: str, kind: RoomKind, data: Any) -> dict[str, Any]:
    room_id = coerce_room_id(data)
    if room_id is None:
        return {"ok": False, "error": "invalid_id"}
    room = RoomId(kind, room_id)
    conn = connections.get_or_create(sid)
    if settings.REALTIME_ENFORCE_ROOM_ACCESS and not await _may_subscribe(conn, room):
        logger.info("Refused subscription sid=%s room=%s", sid, room)
        return {"ok": False, "error": "forbidden", "room": str(room)}
    await conn.subscribe(sio, room)
    logger.debug("sid=%s joined %s", sid, room)
    return {"ok": True, "room": str(room)}


async def unsubscribe(sid: str, kind: RoomKind, data: Any) -> dict[str, Any]:
    room_id = coerce_room_id(data)
    conn = connections.get(sid)
    if room_id is None or conn is None:
        return {"ok": False, "error": "invalid_id"}
    room = RoomId(kind, room_id)
    await conn.unsubscribe(sio, room)
    return {"ok": True, "room": str(room)}


def _subscribe_handler(kind: RoomKind):
    async def handler(sid: str, data: Any = None):
        return await subscribe(sid, kind, data)

    return handler


def _unsubscribe_handler(kind: RoomKind):
    async def handler(sid: str, data: Any = None):
        return await unsubscribe(sid, kind, data)

    return handler


for _event, _kind in SUBSCRIBE_EVENTS.items():
    sio.on(_event, _subscribe_handler(_kind))
for _event, _kind in UNSUBSCRIBE_EVENTS.items():
    sio.on(_event, _unsubscribe_handler(_kind))


def emit_event_to_room(room: RoomId, event: str, payload: Any) -> bool:
    """Emit an event to a room from sync Django code.

    Broadcasts are a cache-invalidation signal, not the system of record: a
    transport failure is logged and reported as ``False``, never raised.
    """

    try:
        async_to_sync(sio.emit)(event, payload, room=str(room))
    except Exception:
        logger.exception("Realtime emit failed: event=%s room=%s", event, room)
        return False
    return True
