from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from typing import Any

from study_hub.chat.api.serializers import MessageSerializer
from study_hub.chat.models import Chat
from study_hub.chat.models import Message
from study_hub.realtime import socketio as realtime_socketio
from study_hub.realtime.events import publisher
from study_hub.realtime.rooms import room_for_class
from study_hub.realtime.rooms import room_for_study_group

if TYPE_CHECKING:  # import for type checking only
    from study_hub.realtime.rooms import RoomId

logger = logging.getLogger(__name__)

CHAT_MESSAGE = "chat-message"


def room_for_chat(chat: Chat) -> RoomId:
    if chat.scope == Chat.Scope.CLASS:
        return room_for_class(chat.course_id)
    return room_for_study_group(chat.study_group_id)


def build_message_payload(message: Message) -> dict[str, Any]:
    return {"chatId": message.chat_id, "message": MessageSerializer(message).data}


@publisher
def publish_chat_message(message_id: int) -> RoomId | None:
    """Fan a committed message out to the chat owner's room."""
    message = (
        Message.objects.select_related("chat", "author").filter(pk=message_id).first()
    )
    if message is None:
        logger.debug("Skipping %s for vanished message %s", CHAT_MESSAGE, message_id)
        return None
    room = room_for_chat(message.chat)
    realtime_socketio.emit_event_to_room(room, CHAT_MESSAGE, build_message_payload(message))
    return room
