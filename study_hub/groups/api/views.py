from __future__ import annotations

from drf_spectacular.utils import OpenApiParameter
from drf_spectacular.utils import extend_schema
from drf_spectacular.utils import extend_schema_view
from rest_framework import mixins
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from study_hub.core import rejections
from study_hub.core.rejections import Rejection
from study_hub.core.rejections import rejection_response
from study_hub.groups import services
from study_hub.groups.models import StudyGroup

from .serializers import JoinSerializer
from .serializers import StudyGroupCreateSerializer
from .serializers import StudyGroupSerializer
from .serializers import StudyGroupUpdateSerializer
from .serializers import with_members


@extend_schema_view(
    list=extend_schema(
        tags=["Study Groups"],
        parameters=[OpenApiParameter("class", int, required=True)],
    ),
    retrieve=extend_schema(tags=["Study Groups"]),
    create=extend_schema(tags=["Study Groups"], request=StudyGroupCreateSerializer),
    update=extend_schema(tags=["Study Groups"], request=StudyGroupUpdateSerializer),
    partial_update=extend_schema(
        tags=["Study Groups"],
        request=StudyGroupUpdateSerializer,
    ),
    destroy=extend_schema(tags=["Study Groups"]),
    join=extend_schema(tags=["Study Groups"], request=JoinSerializer),
    leave=extend_schema(tags=["Study Groups"], request=None),
    my_joined=extend_schema(tags=["Study Groups"]),
    my_created=extend_schema(tags=["Study Groups"]),
)
class StudyGroupViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    GenericViewSet,
):
    """Study groups and their membership transitions.

    All writes go through ``study_hub.groups.services``; business-rule
    rejections come back as ``{"code", "message"}`` bodies.
    """

    serializer_class = StudyGroupSerializer
    pagination_class = None
    lookup_value_regex = r"\d+"

    def get_queryset(self):
        queryset = with_members(StudyGroup.objects.all())
        if self.action == "list":
            course_id = self.request.query_params.get("class", "")
            if not course_id.isdigit():
                return queryset.none()
            return queryset.filter(course_id=int(course_id))
        return queryset

    def _snapshot(self, group: StudyGroup) -> dict:
        group = with_members(StudyGroup.objects.filter(pk=group.pk)).get()
        return StudyGroupSerializer(group, context=self.get_serializer_context()).data

    def create(self, request, *args, **kwargs):
        serializer = StudyGroupCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        result = services.create_study_group(
            request.user,
            course_id=data["classId"],
            name=data["name"],
            max_members=data.get("maxMembers"),
            is_private=data["isPrivate"],
            description=data["description"],
        )
        if isinstance(result, Rejection):
            return rejection_response(result)
        return Response(self._snapshot(result), status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        # Creator rights are checked before the body is validated.
        group = self.get_object()
        if group.created_by_id != request.user.pk:
            return rejection_response(rejections.FORBIDDEN)
        serializer = StudyGroupUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        result = services.edit_study_group(
            group.pk,
            request.user,
            name=data.get("name"),
            description=data.get("description"),
            max_members=data.get("maxMembers"),
        )
        if isinstance(result, Rejection):
            return rejection_response(result)
        return Response(self._snapshot(result))

    def partial_update(self, request, *args, **kwargs):
        return self.update(request, *args, **kwargs)

    def destroy(self, request, *args, **kwargs):
        result = services.disband_study_group(kwargs["pk"], request.user)
        if isinstance(result, Rejection):
            return rejection_response(result)
        return Response({"message": "Study group deleted successfully"})

    @action(detail=True, methods=["post"])
    def join(self, request, pk=None):
        serializer = JoinSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = services.join_study_group(
            pk,
            request.user,
            invite_code=serializer.validated_data.get("inviteCode"),
        )
        if isinstance(result, Rejection):
            return rejection_response(result)
        return Response(self._snapshot(result))

    @action(detail=True, methods=["post"])
    def leave(self, request, pk=None):
        result = services.leave_study_group(pk, request.user)
        if isinstance(result, Rejection):
            return rejection_response(result)
        return Response(
            {
                "message": "Successfully left the study group",
                "studyGroup": self._snapshot(result),
            },
        )

    @action(detail=False, url_path="my-joined")
    def my_joined(self, request):
        groups = (
            self.get_queryset()
            .filter(memberships__user=request.user)
            .exclude(created_by=request.user)
        )
        return Response(self.get_serializer(groups, many=True).data)

    @action(detail=False, url_path="my-created")
    def my_created(self, request):
        groups = self.get_queryset().filter(created_by=request.user)
        return Response(self.get_serializer(groups, many=True).data)
