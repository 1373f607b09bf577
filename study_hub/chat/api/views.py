from drf_spectacular.utils import extend_schema
from rest_framework.response import Response
from rest_framework.views import APIView

from study_hub.chat import services
from study_hub.core.rejections import Rejection
from study_hub.core.rejections import rejection_response

from .serializers import MessageSerializer
from .serializers import PostMessageSerializer
from .serializers import serialize_transcript


def _message_response(result) -> Response:
    if isinstance(result, Rejection):
        return rejection_response(result)
    return Response({"message": MessageSerializer(result).data})


@extend_schema(tags=["Chat"])
class ClassChatView(APIView):
    """Class chat transcript (oldest first) and posting."""

    def get(self, request, course_id: int):
        result = services.read_class_chat(course_id, request.user)
        if isinstance(result, Rejection):
            return rejection_response(result)
        return Response(serialize_transcript(result))

    @extend_schema(request=PostMessageSerializer)
    def post(self, request, course_id: int):
        serializer = PostMessageSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = services.post_class_message(
            course_id,
            request.user,
            serializer.validated_data["message"],
        )
        return _message_response(result)


@extend_schema(tags=["Chat"], request=None)
class ClassChatLeaveView(APIView):
    def post(self, request, course_id: int):
        result = services.leave_class_chat(course_id, request.user)
        if isinstance(result, Rejection):
            return rejection_response(result)
        return Response({"message": "Left class chat successfully"})


@extend_schema(tags=["Chat"], request=None)
class ClassChatRejoinView(APIView):
    def post(self, request, course_id: int):
        result = services.rejoin_class_chat(course_id, request.user)
        if isinstance(result, Rejection):
            return rejection_response(result)
        return Response({"message": "Rejoined class chat successfully"})


@extend_schema(tags=["Chat"])
class StudyGroupChatView(APIView):
    """Members-only study group chat."""

    def get(self, request, group_id: int):
        result = services.read_group_chat(group_id, request.user)
        if isinstance(result, Rejection):
            return rejection_response(result)
        return Response(serialize_transcript(result))

    @extend_schema(request=PostMessageSerializer)
    def post(self, request, group_id: int):
        serializer = PostMessageSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = services.post_group_message(
            group_id,
            request.user,
            serializer.validated_data["message"],
        )
        return _message_response(result)
