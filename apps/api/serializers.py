"""
DRF serializers for the status display feed and API responses.
"""
from rest_framework import serializers

from apps.core.utils import format_timestamp, get_aqi_level


class PollutantSerializer(serializers.Serializer):
    """Serializer for pollutant concentrations."""
    pm25 = serializers.IntegerField()
    pm10 = serializers.IntegerField()
    o3 = serializers.IntegerField()
    no2 = serializers.IntegerField()
    so2 = serializers.IntegerField()
    co = serializers.IntegerField()


class EnrichedRecordSerializer(serializers.Serializer):
    """Serializer for the current enriched record."""
    aqi = serializers.IntegerField()
    level = serializers.SerializerMethodField()
    color = serializers.SerializerMethodField()
    pollutants = serializers.SerializerMethodField()
    temperature = serializers.IntegerField()
    humidity = serializers.IntegerField()
    place_label = serializers.CharField()
    captured_at = serializers.DateTimeField()
    captured_at_display = serializers.SerializerMethodField()
    health_index = serializers.IntegerField()
    trend_label = serializers.CharField()
    recommendations = serializers.ListField(child=serializers.CharField())

    def get_level(self, obj):
        return get_aqi_level(obj.aqi)['level']

    def get_color(self, obj):
        return get_aqi_level(obj.aqi)['color_hex']

    def get_pollutants(self, obj):
        return PollutantSerializer(obj.pollutants()).data

    def get_captured_at_display(self, obj):
        return format_timestamp(obj.captured_at)


class NoticeSerializer(serializers.Serializer):
    message = serializers.CharField()
    level = serializers.CharField()
    source = serializers.CharField(allow_null=True)
    created_at = serializers.DateTimeField()


class LocationSerializer(serializers.Serializer):
    """Serializer for location information."""
    lat = serializers.FloatField(source='coordinate.latitude')
    lon = serializers.FloatField(source='coordinate.longitude')
    city = serializers.CharField(source='place.city')
    country = serializers.CharField(source='place.country')
    is_fallback = serializers.BooleanField()


class BarSerializer(serializers.Serializer):
    key = serializers.CharField()
    label = serializers.CharField()
    value = serializers.IntegerField()
    maximum = serializers.IntegerField()
    ratio = serializers.FloatField()
    color = serializers.CharField()


class StatusSerializer(serializers.Serializer):
    """Main serializer for the status snapshot."""
    record = EnrichedRecordSerializer(allow_null=True)
    location = LocationSerializer(allow_null=True)
    notices = NoticeSerializer(many=True)
    online = serializers.BooleanField()
    published_at = serializers.DateTimeField(allow_null=True)


class CredentialSerializer(serializers.Serializer):
    api_key = serializers.CharField(allow_blank=True, max_length=200, trim_whitespace=True)
