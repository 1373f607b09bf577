"""Membership decisions for study groups.

Each ``decide_*`` function takes a :class:`GroupState` snapshot, the requesting
user id and the request payload, and returns either the next state or a
:class:`~study_hub.core.rejections.Rejection`. Nothing here touches the
database; ``study_hub.groups.services`` persists accepted decisions with
conditional writes so concurrent requests cannot overshoot capacity.
"""

from __future__ import annotations

from dataclasses import dataclass
from dataclasses import replace

from study_hub.core import rejections
from study_hub.core.rejections import Rejection
from study_hub.groups.invite_codes import invite_code_matches
from study_hub.groups.models import MAX_MEMBERS_LIMIT
from study_hub.groups.models import MIN_MEMBERS


@dataclass(frozen=True)
class GroupState:
    course_id: int
    created_by_id: int
    member_ids: tuple[int, ...]
    max_members: int
    is_private: bool = False
    invite_code: str | None = None
    name: str = ""
    description: str = ""
    id: int | None = None

    @classmethod
    def from_group(cls, group) -> GroupState:
        return cls(
            id=group.pk,
            course_id=group.course_id,
            created_by_id=group.created_by_id,
            member_ids=tuple(group.ordered_member_ids()),
            max_members=group.max_members,
            is_private=group.is_private,
            invite_code=group.invite_code,
            name=group.name,
            description=group.description,
        )

    @property
    def member_count(self) -> int:
        return len(self.member_ids)

    @property
    def is_full(self) -> bool:
        return self.member_count >= self.max_members

    def has_member(self, user_id: int) -> bool:
        return user_id in self.member_ids


def check_capacity(max_members) -> Rejection | None:
    if isinstance(max_members, bool) or not isinstance(max_members, int):
        return rejections.INVALID_CAPACITY
    if not MIN_MEMBERS <= max_members <= MAX_MEMBERS_LIMIT:
        return rejections.INVALID_CAPACITY
    return None


def decide_create(  # noqa: PLR0913
    *,
    creator_id: int,
    course_id: int,
    name: str,
    max_members: int,
    is_private: bool = False,
    invite_code: str | None = None,
    description: str = "",
    creator_in_class: bool = True,
) -> GroupState | Rejection:
    """The creator is always the first member."""
    if not creator_in_class:
        return rejections.NOT_A_CLASS_MEMBER
    if rejection := check_capacity(max_members):
        return rejection
    return GroupState(
        course_id=course_id,
        created_by_id=creator_id,
        member_ids=(creator_id,),
        max_members=max_members,
        is_private=is_private,
        invite_code=invite_code if is_private else None,
        name=name,
        description=description,
    )


def decide_join(
    state: GroupState,
    user_id: int,
    invite_code: str | None = None,
) -> GroupState | Rejection:
    if state.has_member(user_id):
        return rejections.ALREADY_MEMBER
    if state.is_full:
        return rejections.GROUP_FULL
    if state.is_private:
        if not invite_code:
            return rejections.INVITE_CODE_REQUIRED
        if not invite_code_matches(state.invite_code, invite_code):
            return rejections.INVITE_CODE_INVALID
    return replace(state, member_ids=(*state.member_ids, user_id))


def decide_leave(state: GroupState, user_id: int) -> GroupState | Rejection:
    if user_id == state.created_by_id:
        return rejections.CREATOR_CANNOT_LEAVE
    if not state.has_member(user_id):
        return rejections.NOT_A_MEMBER
    return replace(
        state,
        member_ids=tuple(uid for uid in state.member_ids if uid != user_id),
    )


def decide_edit(
    state: GroupState,
    user_id: int,
    *,
    name: str | None = None,
    description: str | None = None,
    max_members: int | None = None,
) -> GroupState | Rejection:
    if user_id != state.created_by_id:
        return rejections.FORBIDDEN
    changes: dict = {}
    if name is not None:
        changes["name"] = name
    if description is not None:
        changes["description"] = description
    if max_members is not None:
        if rejection := check_capacity(max_members):
            return rejection
        if max_members < state.member_count:
            return rejections.CAPACITY_BELOW_CURRENT_MEMBERS
        changes["max_members"] = max_members
    return replace(state, **changes)


def decide_disband(state: GroupState, user_id: int) -> GroupState | Rejection:
    """Returns the state being removed; only the creator may disband."""
    if user_id != state.created_by_id:
        return rejections.FORBIDDEN
    return state
