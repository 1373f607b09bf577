from drf_spectacular.utils import OpenApiParameter
from drf_spectacular.utils import extend_schema
from drf_spectacular.utils import extend_schema_view
from rest_framework import mixins
from rest_framework import status
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from study_hub.core.rejections import Rejection
from study_hub.core.rejections import rejection_response
from study_hub.courses import services
from study_hub.courses.models import Course

from .serializers import CourseCreateSerializer
from .serializers import CourseDetailSerializer
from .serializers import CourseSerializer


@extend_schema_view(
    list=extend_schema(
        tags=["Classes"],
        parameters=[OpenApiParameter("university", int, required=False)],
    ),
    retrieve=extend_schema(tags=["Classes"]),
    create=extend_schema(tags=["Classes"], request=CourseCreateSerializer),
    destroy=extend_schema(tags=["Classes"]),
)
class CourseViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.CreateModelMixin,
    mixins.DestroyModelMixin,
    GenericViewSet,
):
    """Classes of a university.

    - list: ``?university=<id>`` (defaults to the requester's university)
    - create: opens a class at the requester's university
    - destroy: creator only; removes its study groups and chats
    """

    serializer_class = CourseSerializer
    pagination_class = None
    lookup_value_regex = r"\d+"

    def get_queryset(self):
        queryset = Course.objects.select_related("created_by", "university")
        if self.action != "list":
            return queryset
        university_id = self.request.query_params.get("university")
        if university_id is None:
            university_id = self.request.user.university_id
        if not str(university_id or "").isdigit():
            return queryset.none()
        return queryset.filter(university_id=int(university_id))

    def get_serializer_class(self):
        if self.action == "retrieve":
            return CourseDetailSerializer
        return CourseSerializer

    def create(self, request, *args, **kwargs):
        serializer = CourseCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = services.create_course(request.user, **serializer.validated_data)
        if isinstance(result, Rejection):
            return rejection_response(result)
        out = CourseSerializer(result, context={"request": request}).data
        return Response(out, status=status.HTTP_201_CREATED)

    def destroy(self, request, *args, **kwargs):
        result = services.delete_course(kwargs["pk"], request.user)
        if isinstance(result, Rejection):
            return rejection_response(result)
        return Response({"message": "Class deleted successfully"})
