import secrets
import string

from rest_framework import serializers

from .models import User


class CurrentUserSerializer(serializers.ModelSerializer):
    name = serializers.CharField(source="display_name", read_only=True)

    class Meta:
        model = User
        fields = ["id", "name", "email", "role"]


class LoginSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(trim_whitespace=False)


class SetupAdminSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(min_length=6, trim_whitespace=False)
    full_name = serializers.CharField(max_length=255)


class StaffSerializer(serializers.ModelSerializer):
    """Staff member as listed on the settings screen.

    `password` is write-only; a temporary one is generated when omitted.
    """

    user_id = serializers.IntegerField(source="id", read_only=True)
    password = serializers.CharField(write_only=True, required=False, allow_blank=True, trim_whitespace=False)
    profile = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = ["id", "user_id", "email", "full_name", "phone", "role", "is_active", "profile", "password", "date_joined"]
        read_only_fields = ["is_active", "date_joined"]
        extra_kwargs = {"full_name": {"required": True, "allow_blank": False}}

    def get_profile(self, obj):
        return {"full_name": obj.display_name, "email": obj.email}

    def validate_email(self, value):
        email = value.strip().lower()
        qs = User.objects.filter(email__iexact=email)
        if self.instance is not None:
            qs = qs.exclude(pk=self.instance.pk)
        if qs.exists():
            raise serializers.ValidationError("A user with this email already exists.")
        return email

    def create(self, validated_data):
        password = validated_data.pop("password", "") or None
        return User.objects.create_user(password=password or generate_temp_password(), **validated_data)

    def update(self, instance, validated_data):
        password = validated_data.pop("password", "")
        instance = super().update(instance, validated_data)
        if password:
            instance.set_password(password)
            instance.save(update_fields=["password"])
        return instance


def generate_temp_password() -> str:
    alphabet = string.ascii_lowercase + string.digits
    return "Temp@" + "".join(secrets.choice(alphabet) for _ in range(8))
