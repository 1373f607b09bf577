import pytest
from django.db import IntegrityError

from tests.factories import make_course

pytestmark = pytest.mark.django_db


def test_code_is_uppercased_on_save(university, user):
    course = make_course(university, user, code=" ma201 ")
    assert course.code == "MA201"


def test_code_unique_per_university(university, user):
    make_course(university, user, code="PH1")
    with pytest.raises(IntegrityError):
        make_course(university, user, code="ph1")


def test_membership_follows_university(course, user, classmate, outsider):
    assert course.has_member(user)
    assert course.has_member(classmate)
    assert not course.has_member(outsider)
