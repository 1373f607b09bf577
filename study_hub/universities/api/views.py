from drf_spectacular.utils import extend_schema
from drf_spectacular.utils import extend_schema_view
from rest_framework.mixins import ListModelMixin
from rest_framework.mixins import RetrieveModelMixin
from rest_framework.permissions import AllowAny
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from study_hub.courses.api.serializers import CourseSerializer
from study_hub.universities.models import University

from .serializers import UniversitySerializer


@extend_schema_view(
    list=extend_schema(tags=["Universities"]),
    retrieve=extend_schema(tags=["Universities"]),
)
class UniversityViewSet(ListModelMixin, RetrieveModelMixin, GenericViewSet):
    """Read-only universities.

    The list is public so the registration form can offer a choice; the detail
    view embeds the university's classes, newest first.
    """

    serializer_class = UniversitySerializer
    queryset = University.objects.all()
    pagination_class = None
    lookup_value_regex = r"\d+"

    def get_permissions(self):
        if self.action == "list":
            return [AllowAny()]
        return [IsAuthenticated()]

    def retrieve(self, request, *args, **kwargs):
        university = self.get_object()
        courses = university.courses.select_related("created_by", "university")
        return Response(
            {
                "university": UniversitySerializer(university).data,
                "classes": CourseSerializer(
                    courses,
                    many=True,
                    context={"request": request},
                ).data,
            },
        )
