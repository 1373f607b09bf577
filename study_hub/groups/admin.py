from django.contrib import admin

from study_hub.groups import models


class MembershipInline(admin.TabularInline):
    model = models.Membership
    extra = 0
    readonly_fields = ["user", "joined_at"]
    can_delete = False


@admin.register(models.StudyGroup)
class StudyGroupAdmin(admin.ModelAdmin):
    list_display = [
        "id",
        "name",
        "course",
        "created_by",
        "member_count",
        "max_members",
        "is_private",
    ]
    search_fields = ["name", "description"]
    list_filter = ["is_private", "created_at"]
    # Membership changes must go through the membership services.
    readonly_fields = ["member_count", "invite_code"]
    inlines = [MembershipInline]
