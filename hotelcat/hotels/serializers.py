from urllib.parse import urlparse

from rest_framework import serializers

from .models import Hotel


class UrlOrPathField(serializers.CharField):
    """Absolute http(s) URL, or a server-relative path such as ``/uploads/...``."""
    default_error_messages = {
        'url_or_path': "Must be a valid URL or a relative path starting with '/'.",
    }

    def to_internal_value(self, data):
        value = super().to_internal_value(data)
        if value.startswith('/'):
            return value
        parsed = urlparse(value)
        if parsed.scheme in ('http', 'https') and parsed.netloc:
            return value
        self.fail('url_or_path')


class HotelSlugField(serializers.SlugField):
    """Slug that is not all digits; ``x-hotel-id`` reads digit-only values as ids."""
    default_error_messages = {
        'numeric': 'Slug cannot consist of digits only.',
    }

    def to_internal_value(self, data):
        value = super().to_internal_value(data)
        if value.isdigit():
            self.fail('numeric')
        return value


class HotelSerializer(serializers.ModelSerializer):
    timeZone = serializers.CharField(source='time_zone', read_only=True)
    imgQr = serializers.CharField(source='img_qr', read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    updatedAt = serializers.DateTimeField(source='updated_at', read_only=True)

    class Meta:
        model = Hotel
        fields = [
            'id', 'name', 'slug', 'description', 'timeZone', 'imgQr',
            'metadata', 'createdAt', 'updatedAt',
        ]
        read_only_fields = fields


class HotelSummarySerializer(serializers.ModelSerializer):
    class Meta:
        model = Hotel
        fields = ['id', 'name', 'slug']
        read_only_fields = fields


class HotelCreateSerializer(serializers.Serializer):
    name = serializers.CharField(min_length=2, max_length=255)
    slug = HotelSlugField(min_length=2, max_length=100)
    description = serializers.CharField(required=False, allow_blank=True)
    timeZone = serializers.CharField(source='time_zone', required=False, max_length=64)
    imgQr = UrlOrPathField(source='img_qr', required=False, allow_null=True, max_length=500)
    metadata = serializers.JSONField(required=False, allow_null=True)


class HotelUpdateSerializer(HotelCreateSerializer):
    name = serializers.CharField(min_length=2, max_length=255, required=False)
    slug = HotelSlugField(min_length=2, max_length=100, required=False)

    def validate(self, data):
        if not data:
            raise serializers.ValidationError('At least one field must be provided')
        return data


class HotelListQuerySerializer(serializers.Serializer):
    search = serializers.CharField(required=False, allow_blank=True)
