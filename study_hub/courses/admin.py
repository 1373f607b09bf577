from django.contrib import admin

from study_hub.courses import models


@admin.register(models.Course)
class CourseAdmin(admin.ModelAdmin):
    list_display = ["id", "code", "name", "university", "created_by", "created_at"]
    search_fields = ["code", "name", "description"]
    list_filter = ["university", "created_at"]
    filter_horizontal = ["chat_opt_outs"]
