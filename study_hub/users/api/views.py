from django.db import transaction
from drf_spectacular.utils import extend_schema
from drf_spectacular.utils import extend_schema_view
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.generics import CreateAPIView
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet
from rest_framework_simplejwt.tokens import RefreshToken

from study_hub.audit.models import AuditLog
from study_hub.audit.utils import log_action
from study_hub.users.models import User

from .serializers import RegisterSerializer
from .serializers import UserSerializer


@extend_schema(tags=["Auth"])
class RegisterView(CreateAPIView):
    """Create an account bound to a university and return a token pair."""

    serializer_class = RegisterSerializer
    permission_classes = [AllowAny]
    authentication_classes: list = []

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        with transaction.atomic():
            user = serializer.save()
            log_action(
                AuditLog.Action.USER_REGISTERED,
                actor=user,
                message=f"email={user.email}",
                model_name="User",
                record_id=user.pk,
            )
        refresh = RefreshToken.for_user(user)
        return Response(
            {
                "access": str(refresh.access_token),
                "refresh": str(refresh),
                "user": UserSerializer(user, context={"request": request}).data,
            },
            status=status.HTTP_201_CREATED,
        )


@extend_schema_view(
    me=extend_schema(tags=["Users"]),
    stats=extend_schema(tags=["Users"]),
    stats_total=extend_schema(tags=["Users"]),
)
class UserViewSet(GenericViewSet):
    serializer_class = UserSerializer
    queryset = User.objects.select_related("university")

    @action(detail=False)
    def me(self, request):
        serializer = UserSerializer(request.user, context={"request": request})
        return Response({"user": serializer.data}, status=status.HTTP_200_OK)

    @action(detail=False)
    def stats(self, request):
        university_id = request.user.university_id
        count = (
            User.objects.filter(university_id=university_id).count()
            if university_id
            else 0
        )
        return Response({"usersInYourUniversity": count})

    @action(
        detail=False,
        url_path="stats/total",
        permission_classes=[AllowAny],
        authentication_classes=[],
    )
    def stats_total(self, request):
        return Response({"totalUsers": User.objects.count()})
