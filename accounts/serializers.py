# accounts/serializers.py
from django.contrib.auth import get_user_model
from django.contrib.auth.password_validation import validate_password
from django.core.exceptions import ValidationError
from django.db import transaction
from rest_framework import serializers

User = get_user_model()


def resolve_username(supplied: str) -> str:
    """Map an email address or case-insensitive username to the stored username."""
    supplied = (supplied or "").strip()
    if not supplied:
        return supplied
    lookup = {"email__iexact": supplied} if "@" in supplied else {f"{User.USERNAME_FIELD}__iexact": supplied}
    user = User.objects.filter(**lookup).order_by("pk").first()
    if user is None:
        return supplied
    return getattr(user, User.USERNAME_FIELD)


class SignupSerializer(serializers.Serializer):
    """
    Signup form: ``name``, ``email``, ``password`` plus optional ``phone``
    and ``address``. The email doubles as the username.
    """

    name = serializers.CharField(max_length=150)
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, min_length=8)
    phone = serializers.CharField(max_length=17, required=False, allow_blank=True)
    address = serializers.CharField(required=False, allow_blank=True)

    def validate_email(self, v):
        v = v.strip().lower()
        if User.objects.filter(email__iexact=v).exists() or User.objects.filter(username__iexact=v).exists():
            raise serializers.ValidationError("Email already registered.")
        return v

    def validate_phone(self, v):
        v = (v or "").strip()
        if v:
            try:
                User.phone_regex(v)
            except ValidationError as e:
                raise serializers.ValidationError(e.messages)
        return v or None

    def validate_password(self, v):
        try:
            validate_password(v)
        except ValidationError as e:
            raise serializers.ValidationError(list(e.messages))
        return v

    @transaction.atomic
    def create(self, validated_data):
        return User.objects.create_user(
            username=validated_data["email"],
            email=validated_data["email"],
            password=validated_data["password"],
            first_name=validated_data["name"].strip(),
            phone_number=validated_data.get("phone"),
            address=(validated_data.get("address") or "").strip(),
        )


class UserProfileSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = ("id", "username", "email", "first_name", "phone_number", "address", "date_joined")
        read_only_fields = ("id", "username", "date_joined")
