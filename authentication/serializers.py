from django.contrib.auth.password_validation import validate_password
from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework import serializers

from .models import CustomUser, ROLE_PERSONAL, ROLE_COMPANY
from .validators import validate_rfc, validate_phone_number


class UserSerializer(serializers.ModelSerializer):
    order_count = serializers.IntegerField(read_only=True, default=0)
    name = serializers.SerializerMethodField()

    class Meta:
        model = CustomUser
        fields = [
            'id', 'email', 'name', 'display_name', 'role', 'company_name', 'rfc',
            'phone_number', 'created_at', 'order_count'
        ]
        read_only_fields = ['id', 'email', 'role', 'created_at', 'order_count']

    def get_name(self, obj):
        return obj.get_display_name()


class ProfileUpdateSerializer(serializers.ModelSerializer):
    class Meta:
        model = CustomUser
        fields = ['display_name', 'phone_number']

    def validate_phone_number(self, value):
        if value:
            try:
                validate_phone_number(value)
            except DjangoValidationError as e:
                raise serializers.ValidationError(e.messages)
        return value


class BaseRegistrationSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(max_length=128, write_only=True)
    confirm_password = serializers.CharField(max_length=128, write_only=True)

    role = None

    def validate_email(self, value):
        value = value.lower()
        if CustomUser.objects.filter(email__iexact=value).exists():
            raise serializers.ValidationError('An account with this email already exists')
        return value

    def validate(self, attrs):
        if attrs['password'] != attrs['confirm_password']:
            raise serializers.ValidationError({'confirm_password': 'Passwords do not match.'})

        candidate = CustomUser(email=attrs['email'], username=attrs['email'])
        try:
            validate_password(attrs['password'], user=candidate)
        except DjangoValidationError as e:
            raise serializers.ValidationError({'password': e.messages})
        return attrs

    def get_profile_fields(self, validated_data):
        return {}

    def create(self, validated_data):
        return CustomUser.objects.create_user(
            username=validated_data['email'],
            email=validated_data['email'],
            password=validated_data['password'],
            role=self.role,
            **self.get_profile_fields(validated_data)
        )


class PersonalRegistrationSerializer(BaseRegistrationSerializer):
    full_name = serializers.CharField(min_length=3, max_length=150)

    role = ROLE_PERSONAL

    def get_profile_fields(self, validated_data):
        return {'display_name': validated_data['full_name']}


class CompanyRegistrationSerializer(BaseRegistrationSerializer):
    company_name = serializers.CharField(min_length=3, max_length=150)
    rfc = serializers.CharField(max_length=13)
    phone = serializers.CharField(max_length=15)

    role = ROLE_COMPANY

    def validate_rfc(self, value):
        value = value.strip().upper()
        try:
            validate_rfc(value)
        except DjangoValidationError as e:
            raise serializers.ValidationError(e.messages)
        return value

    def validate_phone(self, value):
        try:
            validate_phone_number(value)
        except DjangoValidationError as e:
            raise serializers.ValidationError(e.messages)
        return value

    def get_profile_fields(self, validated_data):
        return {
            'company_name': validated_data['company_name'],
            'display_name': validated_data['company_name'],
            'rfc': validated_data['rfc'],
            'phone_number': validated_data['phone'],
        }


class UserRoleUpdateSerializer(serializers.Serializer):
    role = serializers.ChoiceField(choices=CustomUser.ROLE_CHOICES)
