from __future__ import annotations

import logging

from django.db import IntegrityError
from django.db import transaction
from django.db.transaction import on_commit

from study_hub.audit.models import AuditLog
from study_hub.audit.utils import log_action
from study_hub.core import rejections
from study_hub.core.rejections import Rejection
from study_hub.courses.models import Course
from study_hub.realtime.events import courses as course_events

logger = logging.getLogger(__name__)


@transaction.atomic
def create_course(user, *, name: str, code: str, description: str = "") -> Course | Rejection:
    """Open a class at the requester's university."""
    if not user.university_id:
        return rejections.NOT_A_CLASS_MEMBER
    code = code.strip().upper()
    if Course.objects.filter(university_id=user.university_id, code=code).exists():
        return rejections.DUPLICATE_CLASS
    try:
        with transaction.atomic():
            course = Course.objects.create(
                name=name.strip(),
                code=code,
                description=description.strip(),
                university_id=user.university_id,
                created_by=user,
            )
    except IntegrityError:
        # Lost a race with an identical create.
        return rejections.DUPLICATE_CLASS

    log_action(
        AuditLog.Action.CLASS_CREATED,
        actor=user,
        message=f"Created class {course.code}",
        model_name="Course",
        record_id=course.pk,
        after={"name": course.name, "code": course.code},
    )
    logger.info("User %s created class %s", user.pk, course.pk)
    pk = course.pk
    on_commit(lambda: course_events.publish_class_created(pk), robust=True)
    return course


@transaction.atomic
def delete_course(course_id, user) -> Course | Rejection:
    """Creator-only hard delete; cascades to study groups and chats."""
    course = Course.objects.filter(pk=course_id).first()
    if course is None:
        return rejections.CLASS_NOT_FOUND
    if course.created_by_id != user.pk:
        return rejections.CLASS_DELETE_FORBIDDEN

    pk, university_id = course.pk, course.university_id
    before = {"name": course.name, "code": course.code}
    course.delete()
    log_action(
        AuditLog.Action.CLASS_DELETED,
        actor=user,
        message=f"Deleted class {before['code']}",
        model_name="Course",
        record_id=pk,
        before=before,
    )
    logger.info("User %s deleted class %s", user.pk, pk)
    on_commit(
        lambda: course_events.publish_class_deleted(pk, university_id),
        robust=True,
    )
    return course
