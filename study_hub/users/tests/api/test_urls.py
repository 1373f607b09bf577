from django.urls import resolve
from django.urls import reverse


def test_user_me():
    assert reverse("api_v1:users-me") == "/api/v1/users/me/"
    assert resolve("/api/v1/users/me/").view_name == "api_v1:users-me"


def test_user_stats():
    assert reverse("api_v1:users-stats") == "/api/v1/users/stats/"
    assert reverse("api_v1:users-stats-total") == "/api/v1/users/stats/total/"


def test_register():
    assert reverse("api_v1:auth-register") == "/api/v1/auth/register/"
    assert resolve("/api/v1/auth/register/").view_name == "api_v1:auth-register"


def test_schema_docs_available_under_v1():
    assert resolve("/api/v1/schema/").view_name == "api-schema-v1"
    assert resolve("/api/v1/docs/").view_name == "api-docs-v1"


def test_study_group_actions():
    assert reverse("api_v1:study-groups-join", kwargs={"pk": 3}) == (
        "/api/v1/study-groups/3/join/"
    )
    assert reverse("api_v1:study-groups-my-joined") == "/api/v1/study-groups/my-joined/"
