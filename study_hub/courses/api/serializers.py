from rest_framework import serializers

from study_hub.courses.models import Course
from study_hub.groups.api.serializers import StudyGroupSerializer
from study_hub.groups.api.serializers import with_members
from study_hub.universities.api.serializers import UniversitySerializer
from study_hub.users.api.serializers import UserSummarySerializer


class CourseSerializer(serializers.ModelSerializer[Course]):
    """Class snapshot used in lists and ``class-created`` broadcasts."""

    universityId = serializers.IntegerField(source="university_id", read_only=True)  # noqa: N815
    createdBy = UserSummarySerializer(source="created_by", read_only=True)  # noqa: N815
    studyGroupIds = serializers.SerializerMethodField()  # noqa: N815
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)  # noqa: N815

    class Meta:
        model = Course
        fields = [
            "id",
            "name",
            "code",
            "description",
            "universityId",
            "createdBy",
            "studyGroupIds",
            "createdAt",
        ]
        read_only_fields = fields

    def get_studyGroupIds(self, obj: Course) -> list[int]:  # noqa: N802
        return list(obj.study_groups.order_by("id").values_list("id", flat=True))


class CourseDetailSerializer(CourseSerializer):
    university = UniversitySerializer(read_only=True)
    studyGroups = serializers.SerializerMethodField()  # noqa: N815

    class Meta(CourseSerializer.Meta):
        fields = [*CourseSerializer.Meta.fields, "university", "studyGroups"]
        read_only_fields = fields

    def get_studyGroups(self, obj: Course) -> list[dict]:  # noqa: N802
        groups = with_members(obj.study_groups.order_by("id"))
        return StudyGroupSerializer(groups, many=True, context=self.context).data


class CourseCreateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    code = serializers.CharField(max_length=50)
    description = serializers.CharField(required=False, allow_blank=True, default="")

    def validate_code(self, value: str) -> str:
        return value.strip().upper()
