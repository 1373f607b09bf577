from __future__ import annotations

from itertools import count

from study_hub.courses.models import Course
from study_hub.groups import services as group_services
from study_hub.groups.models import StudyGroup
from study_hub.universities.models import University
from study_hub.users.models import User

_seq = count(1)


def make_university(name: str | None = None, code: str | None = None) -> University:
    n = next(_seq)
    return University.objects.create(
        name=name or f"University {n}",
        code=code or f"U{n}",
    )


def make_user(university: University | None, name: str | None = None) -> User:
    n = next(_seq)
    return User.objects.create_user(
        email=f"student{n}@example.com",
        password="TestPass123!",  # noqa: S106
        name=name or f"Student {n}",
        university=university,
    )


def make_course(
    university: University,
    created_by: User,
    code: str | None = None,
) -> Course:
    n = next(_seq)
    return Course.objects.create(
        name=f"Course {n}",
        code=code or f"cs{n}",
        university=university,
        created_by=created_by,
    )


def make_group(
    course: Course,
    creator: User,
    *,
    max_members: int = 10,
    is_private: bool = False,
    name: str | None = None,
) -> StudyGroup:
    group = group_services.create_study_group(
        creator,
        course_id=course.pk,
        name=name or f"Group {next(_seq)}",
        max_members=max_members,
        is_private=is_private,
    )
    assert isinstance(group, StudyGroup), group
    return group


def join(group: StudyGroup, user: User, invite_code: str | None = None):
    return group_services.join_study_group(group.pk, user, invite_code)
