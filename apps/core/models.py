"""
Core models and base classes for Air Quality Monitor.
"""
from django.db import models


class TimeStampedModel(models.Model):
    """
    Abstract base model that provides created_at and updated_at timestamps.
    """
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class StoredSetting(TimeStampedModel):
    """
    Opaque key/value store for settings entered at runtime, such as the
    OpenWeatherMap API key.
    """
    key = models.CharField(max_length=100, unique=True, db_index=True)
    value = models.TextField(blank=True)

    class Meta:
        verbose_name = 'Stored Setting'
        verbose_name_plural = 'Stored Settings'
        ordering = ['key']

    def __str__(self):
        return self.key
