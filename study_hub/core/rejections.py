"""Typed rejections returned by the membership engine and chat gate.

Business-rule violations are values, not exceptions: decision functions return
either a new state or a :class:`Rejection`, and the API layer turns rejections
into HTTP responses with :func:`rejection_response`.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from rest_framework import status
from rest_framework.response import Response


class RejectionKind(str, Enum):
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    FORBIDDEN = "forbidden"
    CONFLICT = "conflict"


HTTP_STATUS_BY_KIND = {
    RejectionKind.VALIDATION: status.HTTP_400_BAD_REQUEST,
    RejectionKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    RejectionKind.FORBIDDEN: status.HTTP_403_FORBIDDEN,
    # Capacity and uniqueness conflicts are reported as 400 to clients.
    RejectionKind.CONFLICT: status.HTTP_400_BAD_REQUEST,
}


@dataclass(frozen=True)
class Rejection:
    code: str
    message: str
    kind: RejectionKind = RejectionKind.CONFLICT

    @property
    def http_status(self) -> int:
        return HTTP_STATUS_BY_KIND[self.kind]

    def as_dict(self) -> dict[str, str]:
        return {"code": self.code, "message": self.message}


# Study group membership
ALREADY_MEMBER = Rejection("AlreadyMember", "Already a member of this study group")
GROUP_FULL = Rejection("GroupFull", "Study group is full")
INVITE_CODE_REQUIRED = Rejection(
    "InviteCodeRequired",
    "This study group is private. An invite code is required to join.",
)
INVITE_CODE_INVALID = Rejection("InviteCodeInvalid", "Invalid invite code")
CREATOR_CANNOT_LEAVE = Rejection(
    "CreatorCannotLeave",
    "Creator cannot leave the group. Delete it instead.",
)
NOT_A_MEMBER = Rejection("NotAMember", "You are not a member of this study group")
FORBIDDEN = Rejection(
    "Forbidden",
    "Only the creator can modify this study group",
    RejectionKind.FORBIDDEN,
)
CAPACITY_BELOW_CURRENT_MEMBERS = Rejection(
    "CapacityBelowCurrentMembers",
    "Max members cannot be less than current members",
)
INVALID_CAPACITY = Rejection(
    "InvalidCapacity",
    "Max members must be between 2 and 50",
    RejectionKind.VALIDATION,
)
DUPLICATE_CODE = Rejection(
    "DuplicateCode",
    "Could not allocate a unique invite code, please retry",
)
STUDY_GROUP_NOT_FOUND = Rejection(
    "NotFound",
    "Study group not found",
    RejectionKind.NOT_FOUND,
)

# Classes
CLASS_NOT_FOUND = Rejection("NotFound", "Class not found", RejectionKind.NOT_FOUND)
NOT_A_CLASS_MEMBER = Rejection(
    "NotAClassMember",
    "You must belong to this class's university",
    RejectionKind.FORBIDDEN,
)
CLASS_DELETE_FORBIDDEN = Rejection(
    "Forbidden",
    "You can only delete classes you created",
    RejectionKind.FORBIDDEN,
)
DUPLICATE_CLASS = Rejection(
    "DuplicateClass",
    "Class code already exists for this university",
)

# Chat
CHAT_LEFT = Rejection(
    "ChatLeft",
    "You have left this chat. Rejoin to send messages.",
    RejectionKind.FORBIDDEN,
)
CHAT_MEMBERS_ONLY = Rejection(
    "NotAMember",
    "You must be a member to use this chat",
    RejectionKind.FORBIDDEN,
)
EMPTY_MESSAGE = Rejection(
    "EmptyMessage",
    "Message is required",
    RejectionKind.VALIDATION,
)


def rejection_response(rejection: Rejection) -> Response:
    return Response(rejection.as_dict(), status=rejection.http_status)
