from django.conf import settings
from django.db import models
from django.db.models import Q
from django.utils.translation import gettext_lazy as _


class Chat(models.Model):
    """One chat per class or per study group, created on first access."""

    class Scope(models.TextChoices):
        CLASS = "class", _("Class")
        STUDY_GROUP = "studyGroup", _("Study group")

    scope = models.CharField(max_length=20, choices=Scope.choices)
    course = models.OneToOneField(
        "courses.Course",
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="chat",
    )
    study_group = models.OneToOneField(
        "study_groups.StudyGroup",
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="chat",
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        constraints = [
            models.CheckConstraint(
                condition=(
                    Q(scope="class", course__isnull=False, study_group__isnull=True)
                    | Q(
                        scope="studyGroup",
                        course__isnull=True,
                        study_group__isnull=False,
                    )
                ),
                name="chat_owner_matches_scope",
            ),
        ]

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"Chat({self.scope}, {self.owner_id})"

    @property
    def owner_id(self) -> int | None:
        if self.scope == self.Scope.CLASS:
            return self.course_id
        return self.study_group_id


class Message(models.Model):
    """An immutable chat message. Id order is the authoritative total order."""

    chat = models.ForeignKey(Chat, on_delete=models.CASCADE, related_name="messages")
    author = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="chat_messages",
    )
    text = models.TextField()
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["id"]

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"[{self.chat_id}] {self.author_id}: {self.text[:30]}"
