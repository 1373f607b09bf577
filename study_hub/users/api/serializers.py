from django.contrib.auth import password_validation
from rest_framework import serializers

from study_hub.universities.api.serializers import UniversitySerializer
from study_hub.universities.models import University
from study_hub.users.models import User


class UserSummarySerializer(serializers.ModelSerializer[User]):
    """Author / member reference embedded in groups, classes and messages."""

    class Meta:
        model = User
        fields = ["id", "name", "email"]
        read_only_fields = fields


class UserSerializer(serializers.ModelSerializer[User]):
    university = UniversitySerializer(read_only=True)

    class Meta:
        model = User
        fields = ["id", "email", "name", "university"]
        read_only_fields = fields


class RegisterSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, trim_whitespace=False)
    name = serializers.CharField(max_length=255)
    universityId = serializers.PrimaryKeyRelatedField(  # noqa: N815
        queryset=University.objects.all(),
        source="university",
        error_messages={"does_not_exist": "Invalid university selected"},
    )

    def validate_email(self, value: str) -> str:
        value = value.strip().lower()
        if User.objects.filter(email__iexact=value).exists():
            msg = "User with this email already exists"
            raise serializers.ValidationError(msg)
        return value

    def validate_password(self, value: str) -> str:
        password_validation.validate_password(value)
        return value

    def create(self, validated_data) -> User:
        return User.objects.create_user(
            email=validated_data["email"],
            password=validated_data["password"],
            name=validated_data["name"],
            university=validated_data["university"],
        )
