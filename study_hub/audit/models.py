from django.conf import settings
from django.db import models
from django.utils.translation import gettext_lazy as _


class AuditLog(models.Model):
    class Action(models.TextChoices):
        CLASS_CREATED = "class_created", _("Class created")
        CLASS_DELETED = "class_deleted", _("Class deleted")
        GROUP_CREATED = "group_created", _("Study group created")
        GROUP_JOINED = "group_joined", _("Study group joined")
        GROUP_LEFT = "group_left", _("Study group left")
        GROUP_UPDATED = "group_updated", _("Study group updated")
        GROUP_DISBANDED = "group_disbanded", _("Study group disbanded")
        CLASS_CHAT_LEFT = "class_chat_left", _("Class chat left")
        CLASS_CHAT_REJOINED = "class_chat_rejoined", _("Class chat rejoined")
        USER_REGISTERED = "user_registered", _("User registered")

    action = models.CharField(max_length=100, choices=Action.choices)
    actor = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
    )
    message = models.TextField(blank=True)
    model_name = models.CharField(max_length=150, blank=True)
    record_id = models.BigIntegerField(null=True, blank=True)
    before = models.JSONField(null=True, blank=True)
    after = models.JSONField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at", "-id"]

    def __str__(self) -> str:  # pragma: no cover - trivial
        who = self.actor_id or "system"
        return f"[{self.created_at}] {who}: {self.action}"
