from unittest import mock

import pytest

from study_hub.core import rejections
from study_hub.groups import services
from study_hub.groups.invite_codes import ALPHABET
from study_hub.groups.invite_codes import generate_invite_code
from study_hub.groups.invite_codes import invite_code_matches
from tests.factories import make_group


def test_codes_are_six_uppercase_alphanumerics():
    code = generate_invite_code()
    assert len(code) == 6  # noqa: PLR2004
    assert set(code) <= set(ALPHABET)


def test_ten_thousand_codes_do_not_collide():
    codes = {generate_invite_code() for _ in range(10_000)}
    assert len(codes) == 10_000  # noqa: PLR2004


def test_matching_is_case_sensitive():
    assert invite_code_matches("ABC123", "ABC123")
    assert not invite_code_matches("ABC123", "abc123")
    assert not invite_code_matches("ABC123", None)
    assert not invite_code_matches(None, "ABC123")


@pytest.mark.django_db
def test_collision_regenerates_code(course, user):
    with mock.patch.object(services, "generate_invite_code", return_value="AAAAAA"):
        first = make_group(course, user, is_private=True)
    with mock.patch.object(
        services,
        "generate_invite_code",
        side_effect=["AAAAAA", "BBBBBB"],
    ):
        second = make_group(course, user, is_private=True)
    assert first.invite_code == "AAAAAA"
    assert second.invite_code == "BBBBBB"


@pytest.mark.django_db
def test_exhausted_attempts_report_duplicate_code(course, user, settings):
    settings.STUDY_GROUP_INVITE_CODE_ATTEMPTS = 3
    with mock.patch.object(services, "generate_invite_code", return_value="AAAAAA"):
        make_group(course, user, is_private=True)
        result = services.create_study_group(
            user,
            course_id=course.pk,
            name="Unlucky",
            is_private=True,
        )
    assert result is rejections.DUPLICATE_CODE
