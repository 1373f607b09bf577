from __future__ import annotations

from typing import Any

from django.db.models import Prefetch
from rest_framework import serializers

from study_hub.groups.models import MAX_MEMBERS_LIMIT
from study_hub.groups.models import MIN_MEMBERS
from study_hub.groups.models import Membership
from study_hub.groups.models import StudyGroup
from study_hub.users.api.serializers import UserSummarySerializer


def with_members(queryset):
    """Prefetch members in join order for snapshot serialization."""
    return queryset.select_related("created_by").prefetch_related(
        Prefetch(
            "memberships",
            queryset=Membership.objects.select_related("user").order_by("id"),
        ),
    )


class StudyGroupSerializer(serializers.ModelSerializer[StudyGroup]):
    """Full group snapshot, as returned by the API and broadcast to rooms.

    ``inviteCode`` is included only when the requesting user is a member;
    snapshots serialized without a request (broadcasts) never carry it.
    """

    classId = serializers.IntegerField(source="course_id", read_only=True)  # noqa: N815
    createdBy = UserSummarySerializer(source="created_by", read_only=True)  # noqa: N815
    members = serializers.SerializerMethodField()
    memberCount = serializers.IntegerField(source="member_count", read_only=True)  # noqa: N815
    maxMembers = serializers.IntegerField(source="max_members", read_only=True)  # noqa: N815
    isPrivate = serializers.BooleanField(source="is_private", read_only=True)  # noqa: N815
    inviteCode = serializers.CharField(source="invite_code", read_only=True)  # noqa: N815
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)  # noqa: N815
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)  # noqa: N815

    class Meta:
        model = StudyGroup
        fields = [
            "id",
            "name",
            "description",
            "classId",
            "createdBy",
            "members",
            "memberCount",
            "maxMembers",
            "isPrivate",
            "inviteCode",
            "createdAt",
            "updatedAt",
        ]
        read_only_fields = fields

    def get_members(self, obj: StudyGroup) -> list[dict[str, Any]]:
        memberships = obj.memberships.all()
        return [UserSummarySerializer(m.user).data for m in memberships]

    def to_representation(self, instance: StudyGroup) -> dict[str, Any]:
        data = super().to_representation(instance)
        if not self._viewer_is_member(data):
            data.pop("inviteCode", None)
        return data

    def _viewer_is_member(self, data: dict[str, Any]) -> bool:
        request = self.context.get("request")
        user = getattr(request, "user", None)
        if user is None or not user.is_authenticated:
            return False
        return any(member["id"] == user.pk for member in data["members"])


class StudyGroupCreateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    classId = serializers.IntegerField(min_value=1)  # noqa: N815
    description = serializers.CharField(required=False, allow_blank=True, default="")
    maxMembers = serializers.IntegerField(  # noqa: N815
        required=False,
        min_value=MIN_MEMBERS,
        max_value=MAX_MEMBERS_LIMIT,
    )
    isPrivate = serializers.BooleanField(required=False, default=False)  # noqa: N815


class StudyGroupUpdateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255, required=False)
    description = serializers.CharField(required=False, allow_blank=True)
    maxMembers = serializers.IntegerField(  # noqa: N815
        required=False,
        min_value=MIN_MEMBERS,
        max_value=MAX_MEMBERS_LIMIT,
    )


class JoinSerializer(serializers.Serializer):
    inviteCode = serializers.CharField(  # noqa: N815
        required=False,
        allow_blank=True,
        allow_null=True,
        trim_whitespace=True,
    )
