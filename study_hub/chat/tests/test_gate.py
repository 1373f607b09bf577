import pytest

from study_hub.chat import gate
from study_hub.core import rejections
from tests.factories import join
from tests.factories import make_group


def test_clean_message():
    assert gate.clean_message("  hi ") == "hi"
    assert gate.clean_message("") is rejections.EMPTY_MESSAGE
    assert gate.clean_message("\n\t") is rejections.EMPTY_MESSAGE
    assert gate.clean_message(None) is rejections.EMPTY_MESSAGE


@pytest.mark.django_db
def test_class_rules(course, user, outsider):
    assert gate.check_class_read(course, user) is None
    assert gate.check_class_post(course, user) is None
    assert gate.check_class_read(course, outsider) is rejections.NOT_A_CLASS_MEMBER

    course.chat_opt_outs.add(user)
    assert gate.check_class_read(course, user) is None
    assert gate.check_class_post(course, user) is rejections.CHAT_LEFT


@pytest.mark.django_db
def test_group_rules(course, user, classmate):
    group = make_group(course, user)
    assert gate.check_group_access(group, user) is None
    assert gate.check_group_access(group, classmate) is rejections.CHAT_MEMBERS_ONLY
    join(group, classmate)
    assert gate.check_group_access(group, classmate) is None
