from decimal import Decimal

from rest_framework import serializers

from .models import Payment, save_payment_and_rebalance


class PaymentSerializer(serializers.ModelSerializer):
    client_name = serializers.CharField(source="client.name", read_only=True)

    class Meta:
        model = Payment
        fields = [
            "id",
            "client",
            "client_name",
            "payment_date",
            "amount",
            "mode",
            "receipt_number",
            "notes",
            "created_by",
            "created_at",
        ]
        read_only_fields = ["receipt_number", "created_by"]

    def validate_amount(self, value):
        if value is None or value <= Decimal("0.00"):
            raise serializers.ValidationError("Amount must be greater than 0.")
        return value

    def create(self, validated_data):
        return save_payment_and_rebalance(Payment(**validated_data))

    def update(self, instance, validated_data):
        previous_client_id = instance.client_id
        for field, value in validated_data.items():
            setattr(instance, field, value)
        return save_payment_and_rebalance(instance, previous_client_id=previous_client_id)
