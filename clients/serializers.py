import re

from rest_framework import serializers

from .models import Client


_GSTIN_RE = re.compile(r"^[0-9A-Z]{15}$")


class ClientSerializer(serializers.ModelSerializer):
    amount_due = serializers.SerializerMethodField()

    class Meta:
        model = Client
        fields = [
            "id",
            "name",
            "city",
            "phone",
            "address",
            "state",
            "pincode",
            "gst_number",
            "opening_balance",
            "current_balance",
            "amount_due",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["current_balance"]

    def get_amount_due(self, obj):
        return obj.amount_due()

    def validate_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Client name is required.")
        return value

    def validate_phone(self, value):
        value = value.strip()
        if not re.fullmatch(r"\+?[0-9 -]{6,20}", value):
            raise serializers.ValidationError("Enter a valid phone number.")
        return value

    def validate_pincode(self, value):
        value = (value or "").strip()
        if value and not re.fullmatch(r"[0-9]{6}", value):
            raise serializers.ValidationError("Pincode must be 6 digits.")
        return value

    def validate_gst_number(self, value):
        value = (value or "").strip().upper()
        if value and not _GSTIN_RE.match(value):
            raise serializers.ValidationError("GST number must be 15 letters/digits.")
        return value


class ClientSummarySerializer(serializers.ModelSerializer):
    class Meta:
        model = Client
        fields = ["id", "name", "city"]
