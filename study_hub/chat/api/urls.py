from django.urls import path

from .views import ClassChatLeaveView
from .views import ClassChatRejoinView
from .views import ClassChatView
from .views import StudyGroupChatView

urlpatterns = [
    path("class/<int:course_id>/", ClassChatView.as_view(), name="class-chat"),
    path(
        "class/<int:course_id>/leave/",
        ClassChatLeaveView.as_view(),
        name="class-chat-leave",
    ),
    path(
        "class/<int:course_id>/rejoin/",
        ClassChatRejoinView.as_view(),
        name="class-chat-rejoin",
    ),
    path(
        "study-group/<int:group_id>/",
        StudyGroupChatView.as_view(),
        name="study-group-chat",
    ),
]
