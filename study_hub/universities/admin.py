from django.contrib import admin

from study_hub.universities import models


@admin.register(models.University)
class UniversityAdmin(admin.ModelAdmin):
    list_display = ["id", "name", "code", "created_at"]
    search_fields = ["name", "code"]

    def has_change_permission(self, request, obj=None):
        return False
