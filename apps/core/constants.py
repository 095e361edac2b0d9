"""
Constants and lookup data for Air Quality Monitor.
"""

# Regional 1-5 index (OpenWeatherMap) to unified 0-500 scale, bucket midpoints
REGIONAL_AQI_CONVERSION = {
    1: 25,   # Good
    2: 75,   # Fair
    3: 125,  # Moderate
    4: 175,  # Poor
    5: 225,  # Very Poor
}
REGIONAL_AQI_DEFAULT = 100

AQI_MIN = 0
AQI_MAX = 500

# Trend ladder on AQI, worst first. A label applies when aqi > threshold.
TREND_HAZARDOUS = 'Hazardous'
TREND_UNHEALTHY = 'Unhealthy'
TREND_MODERATE = 'Moderate'
TREND_FAIR = 'Fair'
TREND_GOOD = 'Good'

TREND_THRESHOLDS = [
    (200, TREND_HAZARDOUS),
    (150, TREND_UNHEALTHY),
    (100, TREND_MODERATE),
    (50, TREND_FAIR),
]

# Ordered best to worst
TREND_LABELS = [TREND_GOOD, TREND_FAIR, TREND_MODERATE, TREND_UNHEALTHY, TREND_HAZARDOUS]

# AQI-tier advisories, worst first; only the first matching tier fires and
# nothing fires at or below 100.
AQI_ADVISORIES = [
    (200, 'Stay indoors and avoid all outdoor activities'),
    (150, 'Avoid outdoor activities, especially for sensitive groups'),
    (100, 'Limit prolonged outdoor activities'),
]

# Pollutant advisories, evaluated independently in this order
POLLUTANT_ADVISORIES = [
    ('pm25', 35, 'Use air purifier indoors and wear N95 mask outdoors'),
    ('pm10', 50, 'Close windows and use air conditioning'),
    ('o3', 100, 'Avoid outdoor exercise, especially during midday'),
    ('no2', 40, 'Limit time near busy roads and traffic'),
]

# Five-tier display ladder shared by the status display and the particles.
# Each entry applies when aqi <= max_value.
AQI_LEVELS = [
    {
        'max_value': 50,
        'level': 'Good',
        'color_hex': '#22C55E',
        'particle_color': 'rgba(34, 197, 94, 0.6)',
    },
    {
        'max_value': 100,
        'level': 'Moderate',
        'color_hex': '#EAB308',
        'particle_color': 'rgba(234, 179, 8, 0.6)',
    },
    {
        'max_value': 150,
        'level': 'Unhealthy for Sensitive Groups',
        'color_hex': '#F97316',
        'particle_color': 'rgba(249, 115, 22, 0.6)',
    },
    {
        'max_value': 200,
        'level': 'Unhealthy',
        'color_hex': '#EF4444',
        'particle_color': 'rgba(239, 68, 68, 0.6)',
    },
    {
        'max_value': None,
        'level': 'Hazardous',
        'color_hex': '#9333EA',
        'particle_color': 'rgba(147, 51, 234, 0.6)',
    },
]

# Pollutant names and properties
POLLUTANTS = {
    'pm25': {
        'name': 'PM2.5',
        'full_name': 'Fine Particulate Matter',
        'unit': 'µg/m³',
    },
    'pm10': {
        'name': 'PM10',
        'full_name': 'Particulate Matter',
        'unit': 'µg/m³',
    },
    'o3': {
        'name': 'O3',
        'full_name': 'Ozone',
        'unit': 'µg/m³',
    },
    'no2': {
        'name': 'NO2',
        'full_name': 'Nitrogen Dioxide',
        'unit': 'µg/m³',
    },
    'so2': {
        'name': 'SO2',
        'full_name': 'Sulfur Dioxide',
        'unit': 'µg/m³',
    },
    'co': {
        'name': 'CO',
        'full_name': 'Carbon Monoxide',
        'unit': 'mg/m³',
    },
}

# Bar chart: pollutant, reference maximum
CHART_POLLUTANTS = [
    ('pm25', 100),
    ('pm10', 200),
    ('o3', 300),
    ('no2', 200),
    ('so2', 150),
]

# Bar color by value/max ratio; each applies when ratio <= bound
BAR_COLORS = [
    (0.3, '#22c55e'),   # low
    (0.6, '#eab308'),   # mid
    (0.8, '#f97316'),   # high
]
BAR_COLOR_CRITICAL = '#ef4444'

# Particle simulation
PARTICLES_PER_AQI = 2
MAX_PARTICLES = 200

# Visualization section identifiers
PARTICLE_SECTION = 'particle-section'
CHART_SECTION = 'chart-section'

# Synthetic generator: elevated baselines for known cities
SYNTHETIC_AQI_BASELINES = {
    'Bengaluru': 150,
    'Mumbai': 180,
}
SYNTHETIC_AQI_DEFAULT_BASELINE = 100

# (base, spread): value = base + randint(0, spread - 1)
SYNTHETIC_RANGES = {
    'aqi': (None, 40),
    'pm25': (25, 50),
    'pm10': (40, 80),
    'o3': (60, 120),
    'no2': (30, 70),
    'so2': (15, 35),
    'co': (8, 20),
    'temperature': (25, 10),
    'humidity': (50, 30),
}

# Secondary provider defaults for missing weather readings
DEFAULT_TEMPERATURE = 20
DEFAULT_HUMIDITY = 50

# Data source codes
DATA_SOURCES = {
    'OPENWEATHERMAP': 'OpenWeatherMap',
    'WAQI': 'WAQI',
    'SYNTHETIC': 'Synthetic',
}

# Credential store key for the OpenWeatherMap API key
OPENWEATHER_KEY_NAME = 'openweather_api_key'

# Notices
NOTICE_DEMO_DATA = 'Failed to fetch real-time data. Using demo data instead.'
NOTICE_LOCATION_FALLBACK = 'Location access unavailable ({reason}). Showing {place}.'
NOTICE_PROVIDER_FAILED = 'Could not reach {providers}. Showing data from {used}.'
