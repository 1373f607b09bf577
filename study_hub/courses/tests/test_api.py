from http import HTTPStatus

import pytest

from study_hub.audit.models import AuditLog
from study_hub.chat.models import Chat
from study_hub.courses.models import Course
from study_hub.groups.models import StudyGroup
from tests.factories import make_course
from tests.factories import make_group

pytestmark = pytest.mark.django_db

BASE = "/api/v1/classes/"


def test_create_uppercases_code_and_uses_requester_university(client_for, user):
    resp = client_for(user).post(
        BASE,
        {"name": "Algorithms", "code": " cs101 ", "description": "Intro"},
        format="json",
    )
    assert resp.status_code == HTTPStatus.CREATED
    data = resp.json()
    assert data["code"] == "CS101"
    assert data["universityId"] == user.university_id
    assert data["createdBy"]["id"] == user.pk
    assert data["studyGroupIds"] == []
    assert AuditLog.objects.filter(action=AuditLog.Action.CLASS_CREATED).exists()


def test_duplicate_code_in_same_university_is_400(client_for, user, classmate):
    client_for(user).post(BASE, {"name": "A", "code": "CS1"}, format="json")
    resp = client_for(classmate).post(BASE, {"name": "B", "code": "cs1"}, format="json")
    assert resp.status_code == HTTPStatus.BAD_REQUEST
    assert resp.json()["code"] == "DuplicateClass"


def test_same_code_in_other_university_is_allowed(client_for, user, outsider):
    client_for(user).post(BASE, {"name": "A", "code": "CS1"}, format="json")
    resp = client_for(outsider).post(BASE, {"name": "A", "code": "CS1"}, format="json")
    assert resp.status_code == HTTPStatus.CREATED


def test_list_defaults_to_own_university(client_for, user, course, outsider):
    make_course(outsider.university, outsider)
    listed = client_for(user).get(BASE).json()
    assert [c["id"] for c in listed] == [course.pk]

    other = client_for(user).get(f"{BASE}?university={outsider.university_id}").json()
    assert len(other) == 1
    assert other[0]["universityId"] == outsider.university_id


def test_detail_embeds_groups(client_for, user, course):
    group = make_group(course, user)
    data = client_for(user).get(f"{BASE}{course.pk}/").json()
    assert data["university"]["id"] == course.university_id
    assert data["studyGroupIds"] == [group.pk]
    assert [g["id"] for g in data["studyGroups"]] == [group.pk]


def test_delete_only_by_creator_and_cascades(client_for, user, classmate, course):
    group = make_group(course, user)
    Chat.objects.create(scope=Chat.Scope.CLASS, course=course)

    denied = client_for(classmate).delete(f"{BASE}{course.pk}/")
    assert denied.status_code == HTTPStatus.FORBIDDEN
    assert denied.json()["message"] == "You can only delete classes you created"

    resp = client_for(user).delete(f"{BASE}{course.pk}/")
    assert resp.status_code == HTTPStatus.OK
    assert not Course.objects.filter(pk=course.pk).exists()
    assert not StudyGroup.objects.filter(pk=group.pk).exists()
    assert not Chat.objects.exists()


def test_delete_missing_class_is_404(client_for, user):
    resp = client_for(user).delete(f"{BASE}424242/")
    assert resp.status_code == HTTPStatus.NOT_FOUND
