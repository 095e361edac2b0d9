"""
Base settings for Air Quality Monitor project.
"""
import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent.parent

SECRET_KEY = os.environ.get('DJANGO_SECRET_KEY', 'insecure-dev-key-change-me')

DEBUG = False

ALLOWED_HOSTS = os.environ.get('DJANGO_ALLOWED_HOSTS', 'localhost').split(',')

INSTALLED_APPS = [
    'django.contrib.admin',
    'django.contrib.auth',
    'django.contrib.contenttypes',
    'django.contrib.sessions',
    'django.contrib.messages',
    'django.contrib.staticfiles',
    'rest_framework',
    'apps.core',
    'apps.adapters',
    'apps.api',
]

MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'django.contrib.sessions.middleware.SessionMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.middleware.csrf.CsrfViewMiddleware',
    'django.contrib.auth.middleware.AuthenticationMiddleware',
    'django.contrib.messages.middleware.MessageMiddleware',
]

ROOT_URLCONF = 'config.urls'

TEMPLATES = [
    {
        'BACKEND': 'django.template.backends.django.DjangoTemplates',
        'DIRS': [],
        'APP_DIRS': True,
        'OPTIONS': {
            'context_processors': [
                'django.template.context_processors.request',
                'django.contrib.auth.context_processors.auth',
                'django.contrib.messages.context_processors.messages',
            ],
        },
    },
]

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': os.environ.get('DATABASE_PATH', BASE_DIR / 'db.sqlite3'),
    }
}

# The status snapshot is shared between the monitor process and the API
# process through the cache, so the default backend must be cross-process.
CACHES = {
    'default': {
        'BACKEND': 'django.core.cache.backends.filebased.FileBasedCache',
        'LOCATION': os.environ.get('CACHE_DIR', BASE_DIR / '.cache'),
    }
}

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

LANGUAGE_CODE = 'en-us'
TIME_ZONE = 'UTC'
USE_I18N = True
USE_TZ = True

STATIC_URL = 'static/'

REST_FRAMEWORK = {
    'DEFAULT_RENDERER_CLASSES': [
        'rest_framework.renderers.JSONRenderer',
    ],
    'DEFAULT_PARSER_CLASSES': [
        'rest_framework.parsers.JSONParser',
    ],
    'DEFAULT_AUTHENTICATION_CLASSES': [],
    'DEFAULT_PERMISSION_CLASSES': [
        'rest_framework.permissions.AllowAny',
    ],
    'UNAUTHENTICATED_USER': None,
    'EXCEPTION_HANDLER': 'apps.api.exceptions.custom_exception_handler',
}

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'verbose': {
            'format': '{asctime} {levelname} {name} {message}',
            'style': '{',
        },
        'simple': {
            'format': '{levelname} {message}',
            'style': '{',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'verbose',
        },
    },
    'root': {
        'handlers': ['console'],
        'level': 'WARNING',
    },
    'loggers': {
        'django': {
            'handlers': ['console'],
            'level': 'INFO',
            'propagate': False,
        },
        'apps': {
            'handlers': ['console'],
            'level': 'INFO',
            'propagate': False,
        },
    },
}

# API keys for data sources. The OpenWeatherMap key may also be stored
# through the credential store, which takes precedence.
API_KEYS = {
    'openweathermap': os.environ.get('OPENWEATHERMAP_API_KEY', ''),
    'waqi': os.environ.get('WAQI_API_KEY', 'demo'),
}

# Fixed position for hosts without a location service, e.g. "12.97,77.59".
POSITION = os.environ.get('MONITOR_POSITION', '')

# 'static' uses POSITION, 'ip' asks an IP geolocation service.
POSITION_SOURCE = os.environ.get('MONITOR_POSITION_SOURCE', 'static')

AIR_QUALITY_SETTINGS = {
    # Provider HTTP behaviour
    'REQUEST_TIMEOUT': 10,
    'MAX_RETRIES': 0,
    'RETRY_BACKOFF_FACTOR': 2,

    # A stored credential selects the metered provider, otherwise the keyless
    # one; either way a failure falls straight through to synthetic data
    'METERED_PROVIDER': 'OPENWEATHERMAP',
    'KEYLESS_PROVIDER': 'WAQI',
    'TRACK_PROVIDER_STATUS': True,

    # Refresh scheduling
    'REFRESH_INTERVAL_SECONDS': 600,
    'REFRESH_ON_RECONNECT': True,
    'CONNECTIVITY_CHECK_URL': 'https://api.waqi.info/',
    'CONNECTIVITY_CHECK_INTERVAL_SECONDS': 30,

    # Location resolution
    'LOCATION_TIMEOUT_SECONDS': 10,
    'LOCATION_MAX_AGE_SECONDS': 300,
    'DEFAULT_LOCATION': {
        'latitude': 12.9716,
        'longitude': 77.5946,
        'city': 'Bengaluru',
        'country': 'IN',
    },
    'GEOCODER_USER_AGENT': 'air-quality-monitor/1.0',

    # Visualization
    'FRAME_INTERVAL_SECONDS': 1 / 60,
    'VISIBILITY_THRESHOLD': 0.1,
    'CANVAS_SIZE': {
        'particle-section': (800, 400),
        'chart-section': (600, 300),
    },

    # Status display feed
    'STATUS_CACHE_KEY': 'monitor:status',
    'STATUS_CACHE_TTL': None,
}
