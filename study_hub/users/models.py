from django.contrib.auth.models import AbstractUser
from django.contrib.auth.models import UserManager as DjangoUserManager
from django.db import models
from django.db.models import CharField
from django.db.models import EmailField
from django.utils.translation import gettext_lazy as _


class UserManager(DjangoUserManager):
    """Email is the login field; the username mirrors it when omitted."""

    def create_user(self, email=None, password=None, **extra_fields):
        username = extra_fields.pop("username", None) or email
        return super().create_user(username, email, password, **extra_fields)

    def create_superuser(self, email=None, password=None, **extra_fields):
        username = extra_fields.pop("username", None) or email
        return super().create_superuser(username, email, password, **extra_fields)


class User(AbstractUser):
    """
    Default custom user model for study_hub.

    Every member belongs to one university; class membership is derived from it.
    """

    # First and last name do not cover name patterns around the globe
    name = CharField(_("Full Name"), blank=True, max_length=255)
    email = EmailField(_("email address"), unique=True)
    university = models.ForeignKey(
        "universities.University",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="members",
    )
    # Audit timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = ["username"]

    objects = UserManager()

    def __str__(self) -> str:
        return self.name or self.email

    def belongs_to_university(self, university_id: int | None) -> bool:
        return university_id is not None and self.university_id == university_id
