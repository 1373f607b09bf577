from django.conf import settings
from django.db import models


class Course(models.Model):
    """A class offered at a university.

    Any member of the university may open a class; only its creator may delete
    it, which cascades to the class's study groups and chats.
    """

    name = models.CharField(max_length=255)
    code = models.CharField(max_length=50)
    university = models.ForeignKey(
        "universities.University",
        on_delete=models.CASCADE,
        related_name="courses",
    )
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="created_courses",
    )
    description = models.TextField(blank=True, default="")
    # Members who left the class chat. Does not affect study groups.
    chat_opt_outs = models.ManyToManyField(
        settings.AUTH_USER_MODEL,
        blank=True,
        related_name="muted_course_chats",
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at", "-id"]
        constraints = [
            models.UniqueConstraint(
                fields=["code", "university"],
                name="course_code_unique_per_university",
            ),
        ]

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"{self.code} - {self.name}"

    def save(self, *args, **kwargs):
        self.code = self.code.strip().upper()
        super().save(*args, **kwargs)

    def has_member(self, user) -> bool:
        return bool(user and getattr(user, "university_id", None) == self.university_id)

    def has_left_chat(self, user) -> bool:
        return self.chat_opt_outs.filter(pk=user.pk).exists()
