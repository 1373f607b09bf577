from django.contrib import admin

from study_hub.chat import models


@admin.register(models.Chat)
class ChatAdmin(admin.ModelAdmin):
    list_display = ["id", "scope", "course", "study_group", "created_at"]
    list_filter = ["scope"]


@admin.register(models.Message)
class MessageAdmin(admin.ModelAdmin):
    list_display = ["id", "chat", "author", "text", "created_at"]
    search_fields = ["text"]
    readonly_fields = ["chat", "author", "text", "created_at"]
