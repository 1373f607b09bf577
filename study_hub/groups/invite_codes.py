"""Invite codes for private study groups.

Codes are short, random and globally unique (enforced by the unique index on
``StudyGroup.invite_code``). They gate joining a private group but are not a
security boundary: anyone holding the code may join.
"""

from __future__ import annotations

import secrets
import string

from django.conf import settings

ALPHABET = string.ascii_uppercase + string.digits


def generate_invite_code(length: int | None = None) -> str:
    length = length or settings.STUDY_GROUP_INVITE_CODE_LENGTH
    return "".join(secrets.choice(ALPHABET) for _ in range(length))


def invite_code_matches(stored: str | None, supplied: str | None) -> bool:
    # Case-sensitive: "abc123" does not open "ABC123".
    if not stored or not supplied:
        return False
    return stored == supplied
