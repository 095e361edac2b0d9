"""
Admin configuration for adapter models.
"""
from django.contrib import admin
from .models import ProviderStatus, AcquisitionLog


@admin.register(ProviderStatus)
class ProviderStatusAdmin(admin.ModelAdmin):
    list_display = ['source', 'success_rate_display', 'consecutive_failures', 'last_success_at', 'last_failure_at']
    list_filter = ['last_success_at', 'last_failure_at']
    search_fields = ['source', 'status_message']
    readonly_fields = ['created_at', 'updated_at', 'success_rate']
    ordering = ['source']

    def success_rate_display(self, obj):
        return f"{obj.success_rate:.1f}%"
    success_rate_display.short_description = 'Success Rate'


@admin.register(AcquisitionLog)
class AcquisitionLogAdmin(admin.ModelAdmin):
    list_display = ['provider_used', 'result_aqi', 'used_fallback', 'execution_time_ms', 'created_at']
    list_filter = ['provider_used', 'used_fallback', 'created_at']
    readonly_fields = ['created_at', 'updated_at']
    ordering = ['-created_at']
    date_hierarchy = 'created_at'
