from http import HTTPStatus

import pytest

from study_hub.chat.models import Chat
from study_hub.chat.models import Message
from tests.factories import join
from tests.factories import make_group

pytestmark = pytest.mark.django_db


def _class_url(course, suffix=""):
    return f"/api/v1/chat/class/{course.pk}/{suffix}"


def _group_url(group):
    return f"/api/v1/chat/study-group/{group.pk}/"


def test_class_chat_created_lazily(client_for, user, course):
    assert not Chat.objects.exists()
    resp = client_for(user).get(_class_url(course))
    assert resp.status_code == HTTPStatus.OK
    chat = resp.json()["chat"]
    assert chat["messages"] == []
    assert chat["hasLeftChat"] is False
    assert Chat.objects.get().course_id == course.pk

    client_for(user).get(_class_url(course))
    assert Chat.objects.count() == 1


def test_post_strips_text_and_lists_oldest_first(client_for, user, classmate, course):
    client_for(user).post(_class_url(course), {"message": "  first  "}, format="json")
    resp = client_for(classmate).post(
        _class_url(course),
        {"message": "second"},
        format="json",
    )
    assert resp.status_code == HTTPStatus.OK
    assert resp.json()["message"]["message"] == "second"
    assert resp.json()["message"]["user"]["id"] == classmate.pk

    messages = client_for(user).get(_class_url(course)).json()["chat"]["messages"]
    assert [m["message"] for m in messages] == ["first", "second"]


@pytest.mark.parametrize("text", ["", "   ", None])
def test_blank_message_is_400(client_for, user, course, text):
    payload = {} if text is None else {"message": text}
    resp = client_for(user).post(_class_url(course), payload, format="json")
    assert resp.status_code == HTTPStatus.BAD_REQUEST
    assert resp.json()["code"] == "EmptyMessage"
    assert not Message.objects.exists()


def test_outsider_cannot_read_or_post(client_for, outsider, course):
    client = client_for(outsider)
    assert client.get(_class_url(course)).status_code == HTTPStatus.FORBIDDEN
    resp = client.post(_class_url(course), {"message": "hi"}, format="json")
    assert resp.status_code == HTTPStatus.FORBIDDEN
    assert resp.json()["code"] == "NotAClassMember"


def test_missing_class_is_404(client_for, user):
    resp = client_for(user).get("/api/v1/chat/class/987654/")
    assert resp.status_code == HTTPStatus.NOT_FOUND


def test_opt_out_blocks_posting_until_rejoin(client_for, user, course):
    client = client_for(user)
    assert client.post(_class_url(course, "leave/")).status_code == HTTPStatus.OK
    # Leaving twice is a no-op success.
    assert client.post(_class_url(course, "leave/")).status_code == HTTPStatus.OK

    read = client.get(_class_url(course)).json()["chat"]
    assert read["hasLeftChat"] is True

    blocked = client.post(_class_url(course), {"message": "hi"}, format="json")
    assert blocked.status_code == HTTPStatus.FORBIDDEN
    assert blocked.json()["code"] == "ChatLeft"

    rejoin = client.post(_class_url(course, "rejoin/"))
    assert rejoin.json() == {"message": "Rejoined class chat successfully"}
    assert client.post(_class_url(course, "rejoin/")).status_code == HTTPStatus.OK

    ok = client.post(_class_url(course), {"message": "back"}, format="json")
    assert ok.status_code == HTTPStatus.OK
    messages = client.get(_class_url(course)).json()["chat"]["messages"]
    assert [m["message"] for m in messages] == ["back"]


def test_opt_out_does_not_touch_study_group_chat(client_for, user, course):
    group = make_group(course, user)
    client = client_for(user)
    client.post(_class_url(course, "leave/"))
    resp = client.post(_group_url(group), {"message": "still here"}, format="json")
    assert resp.status_code == HTTPStatus.OK


def test_group_chat_members_only(client_for, user, classmate, course):
    group = make_group(course, user)
    outsider_resp = client_for(classmate).get(_group_url(group))
    assert outsider_resp.status_code == HTTPStatus.FORBIDDEN
    assert outsider_resp.json()["code"] == "NotAMember"

    join(group, classmate)
    client_for(classmate).post(_group_url(group), {"message": "hey"}, format="json")
    chat = client_for(user).get(_group_url(group)).json()["chat"]
    assert "hasLeftChat" not in chat
    assert [m["message"] for m in chat["messages"]] == ["hey"]


def test_leaving_group_removes_chat_access(client_for, user, classmate, course):
    group = make_group(course, user)
    join(group, classmate)
    client_for(classmate).post(f"/api/v1/study-groups/{group.pk}/leave/")
    resp = client_for(classmate).post(_group_url(group), {"message": "x"}, format="json")
    assert resp.status_code == HTTPStatus.FORBIDDEN
