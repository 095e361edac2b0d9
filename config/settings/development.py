"""
Development settings for Air Quality Monitor project.
"""
from .base import *

DEBUG = True

# Allow all hosts in development
ALLOWED_HOSTS = ['*']

# Refresh more often while developing
AIR_QUALITY_SETTINGS = {
    **AIR_QUALITY_SETTINGS,
    'REFRESH_INTERVAL_SECONDS': 120,
}

# More verbose logging in development
LOGGING['root']['level'] = 'DEBUG'
LOGGING['loggers']['apps']['level'] = 'DEBUG'

# REST Framework - Add browsable API in development
REST_FRAMEWORK['DEFAULT_RENDERER_CLASSES'] = [
    'rest_framework.renderers.JSONRenderer',
    'rest_framework.renderers.BrowsableAPIRenderer',
]
