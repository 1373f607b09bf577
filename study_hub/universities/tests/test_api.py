from http import HTTPStatus

import pytest

from tests.factories import make_course

pytestmark = pytest.mark.django_db


def test_list_is_public(api_client, university, other_university):
    resp = api_client.get("/api/v1/universities/")
    assert resp.status_code == HTTPStatus.OK
    assert {u["id"] for u in resp.json()} == {university.pk, other_university.pk}
    assert set(resp.json()[0]) == {"id", "name", "code"}


def test_detail_requires_auth(api_client, university):
    resp = api_client.get(f"/api/v1/universities/{university.pk}/")
    assert resp.status_code == HTTPStatus.UNAUTHORIZED


def test_detail_embeds_classes(client_for, user, university, course):
    newer = make_course(university, user)
    resp = client_for(user).get(f"/api/v1/universities/{university.pk}/")
    assert resp.status_code == HTTPStatus.OK
    body = resp.json()
    assert body["university"]["id"] == university.pk
    assert [c["id"] for c in body["classes"]] == [newer.pk, course.pk]


def test_unknown_university_is_404(client_for, user):
    resp = client_for(user).get("/api/v1/universities/98765/")
    assert resp.status_code == HTTPStatus.NOT_FOUND
