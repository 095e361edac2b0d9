"""
Credential store for the metered provider's API key.
"""
import logging
from typing import Optional

from django.conf import settings

from .constants import OPENWEATHER_KEY_NAME
from .models import StoredSetting

logger = logging.getLogger(__name__)


class CredentialStore:
    """
    Get/set of a single opaque string.

    A stored value takes precedence over the environment seed in
    settings.API_KEYS. An empty string counts as absent.
    """

    def __init__(self, key: str = OPENWEATHER_KEY_NAME, seed_name: str = 'openweathermap'):
        self.key = key
        self.seed_name = seed_name

    def get(self) -> Optional[str]:
        try:
            stored = StoredSetting.objects.filter(key=self.key).values_list('value', flat=True).first()
        except Exception as e:
            logger.error(f"Failed to read credential '{self.key}': {e}")
            stored = None

        if stored:
            return stored

        seeded = getattr(settings, 'API_KEYS', {}).get(self.seed_name)
        return seeded or None

    def set(self, value: str):
        value = (value or '').strip()
        StoredSetting.objects.update_or_create(key=self.key, defaults={'value': value})
        logger.info(f"Credential '{self.key}' {'updated' if value else 'cleared'}")

    def is_configured(self) -> bool:
        return self.get() is not None
