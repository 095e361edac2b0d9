"""
Admin configuration for core models.
"""
from django.contrib import admin
from .models import StoredSetting


@admin.register(StoredSetting)
class StoredSettingAdmin(admin.ModelAdmin):
    list_display = ['key', 'updated_at']
    search_fields = ['key']
    readonly_fields = ['created_at', 'updated_at']
    ordering = ['key']
