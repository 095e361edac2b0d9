"""
Models for tracking data source health and acquisition cycles.
"""
from django.db import models
from django.utils import timezone

from apps.core.models import TimeStampedModel


class ProviderStatus(models.Model):
    """
    Track the health of each data source adapter.

    Diagnostics only: the provider chain never reorders or skips a provider
    because of these numbers.
    """
    source = models.CharField(max_length=50, unique=True, db_index=True)

    # Health metrics
    last_success_at = models.DateTimeField(null=True, blank=True)
    last_failure_at = models.DateTimeField(null=True, blank=True)
    consecutive_failures = models.IntegerField(default=0)
    total_requests = models.IntegerField(default=0)
    total_failures = models.IntegerField(default=0)

    # Status
    status_message = models.TextField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = 'Provider Status'
        verbose_name_plural = 'Provider Statuses'
        ordering = ['source']

    def __str__(self):
        return f"{self.source} - {self.success_rate:.0f}%"

    @property
    def success_rate(self):
        """Calculate success rate as percentage."""
        if self.total_requests == 0:
            return 0
        return ((self.total_requests - self.total_failures) / self.total_requests) * 100

    @property
    def is_healthy(self):
        return self.consecutive_failures < 5 and self.success_rate > 80

    @classmethod
    def record(cls, source, success, error_message=''):
        status, _ = cls.objects.get_or_create(source=source)

        status.total_requests += 1

        if success:
            status.last_success_at = timezone.now()
            status.consecutive_failures = 0
        else:
            status.last_failure_at = timezone.now()
            status.consecutive_failures += 1
            status.total_failures += 1
            status.status_message = error_message

        status.save()
        return status


class AcquisitionLog(TimeStampedModel):
    """
    One row per acquisition cycle, for debugging and analysis.
    """
    query_lat = models.DecimalField(max_digits=9, decimal_places=6)
    query_lon = models.DecimalField(max_digits=9, decimal_places=6)

    provider_used = models.CharField(max_length=50, db_index=True)
    providers_attempted = models.JSONField(default=list)
    providers_failed = models.JSONField(default=list)
    error_details = models.JSONField(default=dict)

    result_aqi = models.IntegerField(null=True)
    used_fallback = models.BooleanField(default=False)
    execution_time_ms = models.IntegerField(null=True)

    class Meta:
        verbose_name = 'Acquisition Log'
        verbose_name_plural = 'Acquisition Logs'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['provider_used', '-created_at']),
            models.Index(fields=['used_fallback']),
        ]

    def __str__(self):
        return f"{self.provider_used} AQI:{self.result_aqi} at ({self.query_lat}, {self.query_lon})"
