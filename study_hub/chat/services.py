from __future__ import annotations

import logging
from dataclasses import dataclass

from django.db import transaction
from django.db.transaction import on_commit

from study_hub.audit.models import AuditLog
from study_hub.audit.utils import log_action
from study_hub.chat import gate
from study_hub.chat.models import Chat
from study_hub.chat.models import Message
from study_hub.core import rejections
from study_hub.core.rejections import Rejection
from study_hub.courses.models import Course
from study_hub.groups.models import StudyGroup
from study_hub.realtime.events import chat as chat_events

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Transcript:
    chat: Chat
    messages: list[Message]
    has_left_chat: bool | None = None


def _class_chat(course: Course) -> Chat:
    chat, _ = Chat.objects.get_or_create(scope=Chat.Scope.CLASS, course=course)
    return chat


def _group_chat(group: StudyGroup) -> Chat:
    chat, _ = Chat.objects.get_or_create(
        scope=Chat.Scope.STUDY_GROUP,
        study_group=group,
    )
    return chat


def _transcript(chat: Chat, has_left_chat: bool | None = None) -> Transcript:
    messages = list(chat.messages.select_related("author").order_by("id"))
    return Transcript(chat=chat, messages=messages, has_left_chat=has_left_chat)


def _append(chat: Chat, user, text: str) -> Message:
    message = Message.objects.create(chat=chat, author=user, text=text)
    pk = message.pk
    on_commit(lambda: chat_events.publish_chat_message(pk), robust=True)
    return message


@transaction.atomic
def read_class_chat(course_id, user) -> Transcript | Rejection:
    """Opted-out members may still read; the transcript says they left."""
    course = Course.objects.filter(pk=course_id).first()
    if course is None:
        return rejections.CLASS_NOT_FOUND
    if rejection := gate.check_class_read(course, user):
        return rejection
    return _transcript(_class_chat(course), has_left_chat=course.has_left_chat(user))


@transaction.atomic
def post_class_message(course_id, user, text) -> Message | Rejection:
    cleaned = gate.clean_message(text)
    if isinstance(cleaned, Rejection):
        return cleaned
    course = Course.objects.filter(pk=course_id).first()
    if course is None:
        return rejections.CLASS_NOT_FOUND
    if rejection := gate.check_class_post(course, user):
        return rejection
    return _append(_class_chat(course), user, cleaned)


@transaction.atomic
def read_group_chat(group_id, user) -> Transcript | Rejection:
    group = StudyGroup.objects.filter(pk=group_id).first()
    if group is None:
        return rejections.STUDY_GROUP_NOT_FOUND
    if rejection := gate.check_group_access(group, user):
        return rejection
    return _transcript(_group_chat(group))


@transaction.atomic
def post_group_message(group_id, user, text) -> Message | Rejection:
    cleaned = gate.clean_message(text)
    if isinstance(cleaned, Rejection):
        return cleaned
    group = StudyGroup.objects.filter(pk=group_id).first()
    if group is None:
        return rejections.STUDY_GROUP_NOT_FOUND
    if rejection := gate.check_group_access(group, user):
        return rejection
    return _append(_group_chat(group), user, cleaned)


@transaction.atomic
def leave_class_chat(course_id, user) -> Course | Rejection:
    """Idempotent: leaving twice is a no-op success."""
    course = Course.objects.filter(pk=course_id).first()
    if course is None:
        return rejections.CLASS_NOT_FOUND
    if rejection := gate.check_class_read(course, user):
        return rejection
    if not course.has_left_chat(user):
        course.chat_opt_outs.add(user)
        log_action(
            AuditLog.Action.CLASS_CHAT_LEFT,
            actor=user,
            model_name="Course",
            record_id=course.pk,
        )
        logger.info("User %s left chat of class %s", user.pk, course.pk)
    return course


@transaction.atomic
def rejoin_class_chat(course_id, user) -> Course | Rejection:
    course = Course.objects.filter(pk=course_id).first()
    if course is None:
        return rejections.CLASS_NOT_FOUND
    if rejection := gate.check_class_read(course, user):
        return rejection
    if course.has_left_chat(user):
        course.chat_opt_outs.remove(user)
        log_action(
            AuditLog.Action.CLASS_CHAT_REJOINED,
            actor=user,
            model_name="Course",
            record_id=course.pk,
        )
        logger.info("User %s rejoined chat of class %s", user.pk, course.pk)
    return course
