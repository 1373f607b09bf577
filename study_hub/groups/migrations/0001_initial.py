import django.db.models.deletion
from django.conf import settings
from django.db import migrations
from django.db import models


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("courses", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="StudyGroup",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                ("name", models.CharField(max_length=255)),
                ("description", models.TextField(blank=True, default="")),
                (
                    "max_members",
                    models.PositiveSmallIntegerField(
                        default=10,
                        help_text=(
                            "Between 2 and 50, never below the current member count"
                        ),
                    ),
                ),
                ("member_count", models.PositiveSmallIntegerField(default=0)),
                ("is_private", models.BooleanField(default=False)),
                (
                    "invite_code",
                    models.CharField(
                        blank=True,
                        help_text="Set only on private groups",
                        max_length=12,
                        null=True,
                        unique=True,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "course",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="study_groups",
                        to="courses.course",
                    ),
                ),
                (
                    "created_by",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="created_study_groups",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at", "-id"],
            },
        ),
        migrations.CreateModel(
            name="Membership",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                ("joined_at", models.DateTimeField(auto_now_add=True)),
                (
                    "study_group",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="memberships",
                        to="study_groups.studygroup",
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="study_group_memberships",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["id"],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("study_group", "user"),
                        name="membership_unique_user_per_group",
                    ),
                ],
            },
        ),
        migrations.AddField(
            model_name="studygroup",
            name="members",
            field=models.ManyToManyField(
                related_name="study_groups",
                through="study_groups.Membership",
                to=settings.AUTH_USER_MODEL,
            ),
        ),
        migrations.AddConstraint(
            model_name="studygroup",
            constraint=models.CheckConstraint(
                condition=models.Q(("member_count__lte", models.F("max_members"))),
                name="study_group_members_within_capacity",
            ),
        ),
        migrations.AddConstraint(
            model_name="studygroup",
            constraint=models.CheckConstraint(
                condition=models.Q(("max_members__gte", 2), ("max_members__lte", 50)),
                name="study_group_capacity_range",
            ),
        ),
        migrations.AddConstraint(
            model_name="studygroup",
            constraint=models.CheckConstraint(
                condition=models.Q(
                    models.Q(("invite_code__isnull", False), ("is_private", True)),
                    models.Q(("invite_code__isnull", True), ("is_private", False)),
                    _connector="OR",
                ),
                name="study_group_invite_code_iff_private",
            ),
        ),
    ]
