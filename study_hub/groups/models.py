from django.conf import settings
from django.db import models
from django.db.models import F
from django.db.models import Q
from django.utils.translation import gettext_lazy as _

MIN_MEMBERS = 2
MAX_MEMBERS_LIMIT = 50


class StudyGroup(models.Model):
    """A study group inside a class.

    ``member_count`` mirrors the number of :class:`Membership` rows and is the
    column the conditional append guards on; the check constraints make the
    database the final arbiter of capacity.
    """

    name = models.CharField(max_length=255)
    course = models.ForeignKey(
        "courses.Course",
        on_delete=models.CASCADE,
        related_name="study_groups",
    )
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="created_study_groups",
    )
    members = models.ManyToManyField(
        settings.AUTH_USER_MODEL,
        through="Membership",
        related_name="study_groups",
    )
    description = models.TextField(blank=True, default="")
    max_members = models.PositiveSmallIntegerField(
        default=10,
        help_text=_("Between 2 and 50, never below the current member count"),
    )
    member_count = models.PositiveSmallIntegerField(default=0)
    is_private = models.BooleanField(default=False)
    invite_code = models.CharField(
        max_length=12,
        unique=True,
        null=True,
        blank=True,
        help_text=_("Set only on private groups"),
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at", "-id"]
        constraints = [
            models.CheckConstraint(
                condition=Q(member_count__lte=F("max_members")),
                name="study_group_members_within_capacity",
            ),
            models.CheckConstraint(
                condition=Q(max_members__gte=MIN_MEMBERS)
                & Q(max_members__lte=MAX_MEMBERS_LIMIT),
                name="study_group_capacity_range",
            ),
            models.CheckConstraint(
                condition=(
                    Q(is_private=True, invite_code__isnull=False)
                    | Q(is_private=False, invite_code__isnull=True)
                ),
                name="study_group_invite_code_iff_private",
            ),
        ]

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.name

    def ordered_member_ids(self) -> list[int]:
        return list(
            self.memberships.order_by("id").values_list("user_id", flat=True),
        )

    def has_member(self, user) -> bool:
        return self.memberships.filter(user_id=getattr(user, "pk", None)).exists()


class Membership(models.Model):
    """One user's seat in a study group. Row id order is join order."""

    study_group = models.ForeignKey(
        StudyGroup,
        on_delete=models.CASCADE,
        related_name="memberships",
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="study_group_memberships",
    )
    joined_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["id"]
        constraints = [
            models.UniqueConstraint(
                fields=["study_group", "user"],
                name="membership_unique_user_per_group",
            ),
        ]

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"{self.user_id} in {self.study_group_id}"
