from rest_framework import serializers

from hotels.serializers import HotelSummarySerializer

from .models import User


class RegisterSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, min_length=8)
    role = serializers.ChoiceField(choices=User.Role.choices, default=User.Role.MANAGER)
    hotelSlug = serializers.CharField(min_length=2, required=False)

    def validate(self, data):
        if data['role'] == User.Role.MANAGER and not data.get('hotelSlug'):
            raise serializers.ValidationError(
                {'hotelSlug': ['hotelSlug is required for MANAGER role']}
            )
        return data


class LoginSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, min_length=8)


class UserSerializer(serializers.ModelSerializer):
    hotel = HotelSummarySerializer(read_only=True)

    class Meta:
        model = User
        fields = ['id', 'email', 'role', 'hotel']
        read_only_fields = fields


class RegisteredUserSerializer(UserSerializer):
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)

    class Meta(UserSerializer.Meta):
        fields = UserSerializer.Meta.fields + ['createdAt']
        read_only_fields = fields
