"""Persisted study group transitions.

Every public function here is the single entry point for one operation: it
loads the group, asks :mod:`study_hub.groups.membership` for a decision, writes
the accepted decision with a conditional update, records an audit entry and
schedules the realtime event for after the commit.
"""

from __future__ import annotations

import logging
from dataclasses import asdict

from django.conf import settings
from django.db import IntegrityError
from django.db import transaction
from django.db.models import F
from django.db.transaction import on_commit
from django.utils import timezone

from study_hub.audit.models import AuditLog
from study_hub.audit.utils import log_action
from study_hub.core import rejections
from study_hub.core.rejections import Rejection
from study_hub.courses.models import Course
from study_hub.groups.invite_codes import generate_invite_code
from study_hub.groups.membership import GroupState
from study_hub.groups.membership import decide_create
from study_hub.groups.membership import decide_disband
from study_hub.groups.membership import decide_edit
from study_hub.groups.membership import decide_join
from study_hub.groups.membership import decide_leave
from study_hub.groups.models import Membership
from study_hub.groups.models import StudyGroup
from study_hub.realtime.events import groups as group_events

logger = logging.getLogger(__name__)


def _audit_state(state: GroupState) -> dict:
    data = asdict(state)
    data.pop("invite_code", None)
    data["member_ids"] = list(state.member_ids)
    return data


def _load(group_id) -> StudyGroup | None:
    return StudyGroup.objects.select_related("course").filter(pk=group_id).first()


@transaction.atomic
def create_study_group(  # noqa: PLR0913
    user,
    *,
    course_id: int,
    name: str,
    max_members: int | None = None,
    is_private: bool = False,
    description: str = "",
) -> StudyGroup | Rejection:
    course = Course.objects.filter(pk=course_id).first()
    if course is None:
        return rejections.CLASS_NOT_FOUND
    if max_members is None:
        max_members = settings.STUDY_GROUP_DEFAULT_MAX_MEMBERS

    decision = decide_create(
        creator_id=user.pk,
        course_id=course.pk,
        name=name,
        max_members=max_members,
        is_private=is_private,
        description=description,
        creator_in_class=course.has_member(user),
    )
    if isinstance(decision, Rejection):
        return decision

    for attempt in range(1, settings.STUDY_GROUP_INVITE_CODE_ATTEMPTS + 1):
        invite_code = generate_invite_code() if is_private else None
        try:
            with transaction.atomic():
                group = StudyGroup.objects.create(
                    name=decision.name,
                    course=course,
                    created_by=user,
                    description=decision.description,
                    max_members=decision.max_members,
                    member_count=1,
                    is_private=is_private,
                    invite_code=invite_code,
                )
                Membership.objects.create(study_group=group, user=user)
        except IntegrityError:
            if not is_private:
                raise
            logger.warning("Invite code collision on attempt %s, regenerating", attempt)
            continue
        break
    else:
        return rejections.DUPLICATE_CODE

    state = GroupState.from_group(group)
    log_action(
        AuditLog.Action.GROUP_CREATED,
        actor=user,
        message=f"Created study group {group.name}",
        model_name="StudyGroup",
        record_id=group.pk,
        after=_audit_state(state),
    )
    logger.info("User %s created study group %s", user.pk, group.pk)
    group_id = group.pk
    on_commit(lambda: group_events.publish_group_created(group_id), robust=True)
    return group


def join_study_group(group_id, user, invite_code: str | None = None):
    group = _load(group_id)
    if group is None:
        return rejections.STUDY_GROUP_NOT_FOUND
    decision = decide_join(GroupState.from_group(group), user.pk, invite_code)
    if isinstance(decision, Rejection):
        return decision
    return persist_join(group, user)


@transaction.atomic
def persist_join(group: StudyGroup, user) -> StudyGroup | Rejection:
    """Claim a seat only if one is still free when the write lands.

    ``group`` may be stale: the guard is evaluated by the database, so two
    requests that both saw a free seat cannot both take the last one.
    """
    try:
        with transaction.atomic():
            claimed = StudyGroup.objects.filter(
                pk=group.pk,
                member_count__lt=F("max_members"),
            ).update(member_count=F("member_count") + 1, updated_at=timezone.now())
            if not claimed:
                if not StudyGroup.objects.filter(pk=group.pk).exists():
                    return rejections.STUDY_GROUP_NOT_FOUND
                return rejections.GROUP_FULL
            Membership.objects.create(study_group_id=group.pk, user=user)
    except IntegrityError:
        return rejections.ALREADY_MEMBER

    group.refresh_from_db()
    log_action(
        AuditLog.Action.GROUP_JOINED,
        actor=user,
        message=f"Joined study group {group.name}",
        model_name="StudyGroup",
        record_id=group.pk,
        after={"member_count": group.member_count},
    )
    logger.info("User %s joined study group %s", user.pk, group.pk)
    group_id = group.pk
    on_commit(lambda: group_events.publish_group_updated(group_id), robust=True)
    return group


@transaction.atomic
def leave_study_group(group_id, user) -> StudyGroup | Rejection:
    group = _load(group_id)
    if group is None:
        return rejections.STUDY_GROUP_NOT_FOUND
    decision = decide_leave(GroupState.from_group(group), user.pk)
    if isinstance(decision, Rejection):
        return decision

    deleted, _ = Membership.objects.filter(study_group_id=group.pk, user=user).delete()
    if not deleted:
        # A concurrent leave already removed the row.
        return rejections.NOT_A_MEMBER
    StudyGroup.objects.filter(pk=group.pk).update(
        member_count=F("member_count") - 1,
        updated_at=timezone.now(),
    )
    group.refresh_from_db()
    log_action(
        AuditLog.Action.GROUP_LEFT,
        actor=user,
        message=f"Left study group {group.name}",
        model_name="StudyGroup",
        record_id=group.pk,
        after={"member_count": group.member_count},
    )
    logger.info("User %s left study group %s", user.pk, group.pk)
    pk = group.pk
    on_commit(lambda: group_events.publish_group_updated(pk), robust=True)
    return group


@transaction.atomic
def edit_study_group(
    group_id,
    user,
    *,
    name: str | None = None,
    description: str | None = None,
    max_members: int | None = None,
) -> StudyGroup | Rejection:
    group = _load(group_id)
    if group is None:
        return rejections.STUDY_GROUP_NOT_FOUND
    before = GroupState.from_group(group)
    decision = decide_edit(
        before,
        user.pk,
        name=name,
        description=description,
        max_members=max_members,
    )
    if isinstance(decision, Rejection):
        return decision

    queryset = StudyGroup.objects.filter(pk=group.pk)
    if max_members is not None:
        # Members may have joined since the read above.
        queryset = queryset.filter(member_count__lte=max_members)
    updated = queryset.update(
        name=decision.name,
        description=decision.description,
        max_members=decision.max_members,
        updated_at=timezone.now(),
    )
    if not updated:
        if StudyGroup.objects.filter(pk=group.pk).exists():
            return rejections.CAPACITY_BELOW_CURRENT_MEMBERS
        return rejections.STUDY_GROUP_NOT_FOUND

    group.refresh_from_db()
    log_action(
        AuditLog.Action.GROUP_UPDATED,
        actor=user,
        message=f"Updated study group {group.name}",
        model_name="StudyGroup",
        record_id=group.pk,
        before=_audit_state(before),
        after=_audit_state(GroupState.from_group(group)),
    )
    pk = group.pk
    on_commit(lambda: group_events.publish_group_updated(pk), robust=True)
    return group


@transaction.atomic
def disband_study_group(group_id, user) -> GroupState | Rejection:
    group = _load(group_id)
    if group is None:
        return rejections.STUDY_GROUP_NOT_FOUND
    decision = decide_disband(GroupState.from_group(group), user.pk)
    if isinstance(decision, Rejection):
        return decision

    pk, course_id = group.pk, group.course_id
    # Cascades to memberships and the group's chat.
    group.delete()
    log_action(
        AuditLog.Action.GROUP_DISBANDED,
        actor=user,
        message=f"Disbanded study group {decision.name}",
        model_name="StudyGroup",
        record_id=pk,
        before=_audit_state(decision),
    )
    logger.info("User %s disbanded study group %s", user.pk, pk)
    on_commit(lambda: group_events.publish_group_deleted(pk, course_id), robust=True)
    return decision
