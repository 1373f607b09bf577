from rest_framework import serializers

from study_hub.chat.models import Message
from study_hub.users.api.serializers import UserSummarySerializer


class MessageSerializer(serializers.ModelSerializer[Message]):
    user = UserSummarySerializer(source="author", read_only=True)
    message = serializers.CharField(source="text", read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)  # noqa: N815

    class Meta:
        model = Message
        fields = ["id", "user", "message", "createdAt"]
        read_only_fields = fields


class PostMessageSerializer(serializers.Serializer):
    # Blank text is rejected by the chat gate with its own error code.
    message = serializers.CharField(required=False, allow_blank=True, default="")


def serialize_transcript(transcript) -> dict:
    chat = {
        "id": transcript.chat.pk,
        "messages": MessageSerializer(transcript.messages, many=True).data,
    }
    if transcript.has_left_chat is not None:
        chat["hasLeftChat"] = transcript.has_left_chat
    return {"chat": chat}
