"""
Test settings for Air Quality Monitor project.
"""
from .base import *

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

CACHES = {
    'default': {
        'BACKEND': 'django.core.cache.backends.locmem.LocMemCache',
    }
}

API_KEYS = {
    'openweathermap': '',
    'waqi': 'demo',
}

POSITION = ''
POSITION_SOURCE = 'static'

AIR_QUALITY_SETTINGS = {
    **AIR_QUALITY_SETTINGS,
    'TRACK_PROVIDER_STATUS': False,
}

LOGGING['loggers']['apps']['level'] = 'DEBUG'
