from decimal import Decimal

from django.db import transaction
from rest_framework import serializers

from clients.models import Client
from core.filters import parse_month

from .models import Invoice, InvoiceItem


class InvoiceItemSerializer(serializers.ModelSerializer):
    amount = serializers.DecimalField(max_digits=14, decimal_places=2, required=False)

    class Meta:
        model = InvoiceItem
        fields = ["id", "order", "description", "location", "quantity", "rate", "amount"]

    def validate(self, attrs):
        # Required even when the invoice PATCH is partial.
        description = (attrs.get("description") or "").strip()
        if not description:
            raise serializers.ValidationError({"description": "Description is required."})
        attrs["description"] = description
        if attrs.get("quantity") is not None and attrs["quantity"] < 0:
            raise serializers.ValidationError({"quantity": "Quantity cannot be negative."})
        if attrs.get("rate") is not None and attrs["rate"] < 0:
            raise serializers.ValidationError({"rate": "Rate cannot be negative."})
        if attrs.get("amount") is None:
            quantity = attrs.get("quantity") or Decimal("0")
            rate = attrs.get("rate") or Decimal("0")
            attrs["amount"] = (quantity * rate).quantize(Decimal("0.01"))
        return attrs


class InvoiceSerializer(serializers.ModelSerializer):
    client_name = serializers.CharField(source="client.name", read_only=True)
    items = InvoiceItemSerializer(many=True, required=False)

    class Meta:
        model = Invoice
        fields = [
            "id",
            "client",
            "client_name",
            "invoice_number",
            "bill_month",
            "orders_total",
            "previous_balance",
            "paid_amount",
            "total_payable",
            "remaining_balance",
            "notes",
            "items",
            "created_by",
            "created_at",
            "updated_at",
        ]
        read_only_fields = [
            "client",
            "invoice_number",
            "bill_month",
            "orders_total",
            "total_payable",
            "remaining_balance",
            "created_by",
        ]

    def validate_items(self, items):
        client_id = getattr(self.instance, "client_id", None)
        for item in items:
            order = item.get("order")
            if order is not None and client_id is not None and order.client_id != client_id:
                raise serializers.ValidationError(f"Order {order.order_number or order.pk} belongs to another client.")
        return items

    @transaction.atomic
    def update(self, instance, validated_data):
        items = validated_data.pop("items", None)
        for field, value in validated_data.items():
            setattr(instance, field, value)
        instance.save()
        if items is not None:
            instance.items.all().delete()
            InvoiceItem.objects.bulk_create([InvoiceItem(invoice=instance, **item) for item in items])
        instance.recalculate_totals()
        return instance


class InvoiceCreateSerializer(serializers.Serializer):
    """Input for generating an invoice: a client and any date (or YYYY-MM) in the month."""

    client = serializers.PrimaryKeyRelatedField(queryset=Client.objects.all())
    bill_month = serializers.CharField()
    notes = serializers.CharField(required=False, allow_blank=True, default="")

    def validate_bill_month(self, value):
        try:
            return parse_month(value)
        except ValueError:
            raise serializers.ValidationError("Use the YYYY-MM format.")


class InvoicePreviewItemSerializer(serializers.Serializer):
    order = serializers.SerializerMethodField()
    description = serializers.CharField()
    location = serializers.CharField()
    quantity = serializers.DecimalField(max_digits=12, decimal_places=3)
    rate = serializers.DecimalField(max_digits=12, decimal_places=2)
    amount = serializers.DecimalField(max_digits=14, decimal_places=2)

    def get_order(self, obj):
        return obj["order"].pk


class InvoicePreviewSerializer(serializers.Serializer):
    client = serializers.SerializerMethodField()
    client_name = serializers.SerializerMethodField()
    invoice_number = serializers.CharField()
    bill_month = serializers.DateField()
    orders_total = serializers.DecimalField(max_digits=14, decimal_places=2)
    previous_balance = serializers.DecimalField(max_digits=14, decimal_places=2)
    paid_amount = serializers.DecimalField(max_digits=14, decimal_places=2)
    total_payable = serializers.DecimalField(max_digits=14, decimal_places=2)
    remaining_balance = serializers.DecimalField(max_digits=14, decimal_places=2)
    items = InvoicePreviewItemSerializer(many=True)

    def get_client(self, obj):
        return obj["client"].pk

    def get_client_name(self, obj):
        return obj["client"].name
