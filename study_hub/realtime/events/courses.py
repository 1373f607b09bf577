from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from typing import Any

from study_hub.courses.api.serializers import CourseSerializer
from study_hub.courses.models import Course
from study_hub.realtime import socketio as realtime_socketio
from study_hub.realtime.events import publisher
from study_hub.realtime.rooms import room_for_university

if TYPE_CHECKING:  # import for type checking only
    from study_hub.realtime.rooms import RoomId

logger = logging.getLogger(__name__)

CLASS_CREATED = "class-created"
CLASS_DELETED = "class-deleted"


def build_class_payload(course: Course) -> dict[str, Any]:
    return dict(CourseSerializer(course).data)


@publisher
def publish_class_created(course_id: int) -> RoomId | None:
    course = Course.objects.select_related("created_by").filter(pk=course_id).first()
    if course is None:
        logger.debug("Skipping %s for vanished class %s", CLASS_CREATED, course_id)
        return None
    room = room_for_university(course.university_id)
    realtime_socketio.emit_event_to_room(room, CLASS_CREATED, build_class_payload(course))
    return room


@publisher
def publish_class_deleted(course_id: int, university_id: int) -> RoomId:
    room = room_for_university(university_id)
    realtime_socketio.emit_event_to_room(room, CLASS_DELETED, {"id": course_id})
    return room
