from django.db import models


class University(models.Model):
    """A university. Records are seeded and never edited through the API."""

    name = models.CharField(max_length=255, unique=True)
    code = models.CharField(max_length=20, unique=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["name"]
        verbose_name_plural = "universities"

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"{self.name} ({self.code})"

    def save(self, *args, **kwargs):
        self.name = self.name.strip()
        self.code = self.code.strip().upper()
        super().save(*args, **kwargs)
