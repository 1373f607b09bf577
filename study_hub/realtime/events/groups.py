from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from typing import Any

from study_hub.groups.api.serializers import StudyGroupSerializer
from study_hub.groups.api.serializers import with_members
from study_hub.groups.models import StudyGroup
from study_hub.realtime import socketio as realtime_socketio
from study_hub.realtime.events import publisher
from study_hub.realtime.rooms import room_for_class

if TYPE_CHECKING:  # import for type checking only
    from study_hub.realtime.rooms import RoomId

logger = logging.getLogger(__name__)

GROUP_CREATED = "group-created"
GROUP_UPDATED = "group-updated"
GROUP_DELETED = "group-deleted"


def build_group_payload(group: StudyGroup) -> dict[str, Any]:
    # No request in context: broadcast snapshots never carry the invite code.
    return dict(StudyGroupSerializer(group).data)


def _publish_snapshot(group_id: int, event: str) -> RoomId | None:
    group = with_members(StudyGroup.objects.filter(pk=group_id)).first()
    if group is None:
        logger.debug("Skipping %s for vanished study group %s", event, group_id)
        return None
    room = room_for_class(group.course_id)
    realtime_socketio.emit_event_to_room(room, event, build_group_payload(group))
    return room


@publisher
def publish_group_created(group_id: int) -> RoomId | None:
    """Announce a new study group to everyone viewing its class."""
    return _publish_snapshot(group_id, GROUP_CREATED)


@publisher
def publish_group_updated(group_id: int) -> RoomId | None:
    """Join, leave and edit all publish the fresh snapshot."""
    return _publish_snapshot(group_id, GROUP_UPDATED)


@publisher
def publish_group_deleted(group_id: int, course_id: int) -> RoomId:
    room = room_for_class(course_id)
    realtime_socketio.emit_event_to_room(room, GROUP_DELETED, {"id": group_id})
    return room
