"""Who may read and post in which chat.

Class chat: any member of the class's university may read; posting also
requires that the user has not left the chat. Study-group chat: current group
members only, with no separate opt-out.
"""

from __future__ import annotations

from study_hub.core import rejections
from study_hub.core.rejections import Rejection


def check_class_read(course, user) -> Rejection | None:
    if not course.has_member(user):
        return rejections.NOT_A_CLASS_MEMBER
    return None


def check_class_post(course, user) -> Rejection | None:
    if rejection := check_class_read(course, user):
        return rejection
    if course.has_left_chat(user):
        return rejections.CHAT_LEFT
    return None


def check_group_access(group, user) -> Rejection | None:
    if not group.has_member(user):
        return rejections.CHAT_MEMBERS_ONLY
    return None


def clean_message(text) -> str | Rejection:
    if not isinstance(text, str) or not text.strip():
        return rejections.EMPTY_MESSAGE
    return text.strip()
