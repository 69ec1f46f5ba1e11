from rest_framework import serializers
from django.contrib.auth.password_validation import validate_password
from .models import User, Gender


class UserSerializer(serializers.ModelSerializer):
    """Basic user serializer for profile display."""

    class Meta:
        model = User
        fields = [
            'id',
            'external_id',
            'display_name',
            'gender',
            'is_real',
            'is_staff',
            'created_at',
            'last_login',
        ]
        read_only_fields = ['id', 'external_id', 'is_real', 'is_staff', 'created_at', 'last_login']


class UserRegistrationSerializer(serializers.Serializer):
    """Serializer for registering (or refreshing) a bot participant."""

    external_id = serializers.CharField(max_length=100)
    display_name = serializers.CharField(max_length=100)
    gender = serializers.ChoiceField(choices=Gender.choices)
    password = serializers.CharField(
        write_only=True,
        required=False,
        validators=[validate_password],
        style={'input_type': 'password'}
    )

    def validate_external_id(self, value):
        if value.startswith('proxy_'):
            raise serializers.ValidationError('The proxy_ prefix is reserved')
        if User.objects.filter(external_id=value).exists():
            raise serializers.ValidationError('Already registered, log in instead')
        return value


class UserLoginSerializer(serializers.Serializer):
    """Serializer for user login."""

    external_id = serializers.CharField(required=True)
    password = serializers.CharField(
        required=True,
        write_only=True,
        style={'input_type': 'password'}
    )


class UserPublicSerializer(serializers.ModelSerializer):
    """Public user info (for votes, proxy votes and payments)."""

    class Meta:
        model = User
        fields = ['id', 'display_name', 'gender', 'is_real']
        read_only_fields = fields
