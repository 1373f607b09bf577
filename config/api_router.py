from django.conf import settings
from django.urls import include
from django.urls import path
from rest_framework.routers import DefaultRouter
from rest_framework.routers import SimpleRouter

from study_hub.courses.api.views import CourseViewSet
from study_hub.groups.api.views import StudyGroupViewSet
from study_hub.universities.api.views import UniversityViewSet
from study_hub.users.api.views import RegisterView
from study_hub.users.api.views import UserViewSet

router = DefaultRouter() if settings.DEBUG else SimpleRouter()

router.register("users", UserViewSet, basename="users")
router.register("universities", UniversityViewSet, basename="universities")
# Model is Course; clients know it as a class.
router.register("classes", CourseViewSet, basename="classes")
router.register("study-groups", StudyGroupViewSet, basename="study-groups")


app_name = "api"
urlpatterns = [
    path("auth/register/", RegisterView.as_view(), name="auth-register"),
    path("chat/", include("study_hub.chat.api.urls")),
    *router.urls,
]
