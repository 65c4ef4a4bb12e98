from decimal import Decimal

from rest_framework import serializers

from .models import MaterialRate, Order, Vehicle, save_order_and_rebalance


class MaterialRateSerializer(serializers.ModelSerializer):
    class Meta:
        model = MaterialRate
        fields = ["id", "material", "rate", "updated_at"]
        # Uniqueness is checked case-insensitively in validate_material.
        extra_kwargs = {"material": {"validators": []}}

    def validate_material(self, value):
        value = (value or "").strip().upper()
        if not value:
            raise serializers.ValidationError("Material name is required.")
        qs = MaterialRate.objects.filter(material__iexact=value)
        if self.instance is not None:
            qs = qs.exclude(pk=self.instance.pk)
        if qs.exists():
            raise serializers.ValidationError("A rate for this material already exists.")
        return value

    def validate_rate(self, value):
        if value < 0:
            raise serializers.ValidationError("Rate cannot be negative.")
        return value


class VehicleSerializer(serializers.ModelSerializer):
    class Meta:
        model = Vehicle
        fields = ["id", "vehicle_number", "created_at"]
        extra_kwargs = {"vehicle_number": {"validators": []}}

    def validate_vehicle_number(self, value):
        value = " ".join((value or "").split()).upper()
        if not value:
            raise serializers.ValidationError("Vehicle number is required.")
        if Vehicle.objects.filter(vehicle_number__iexact=value).exists():
            raise serializers.ValidationError("This vehicle is already registered.")
        return value


class OrderSerializer(serializers.ModelSerializer):
    client_name = serializers.CharField(source="client.name", read_only=True)
    client_city = serializers.CharField(source="client.city", read_only=True)
    rate = serializers.DecimalField(max_digits=12, decimal_places=2, required=False)

    class Meta:
        model = Order
        fields = [
            "id",
            "client",
            "client_name",
            "client_city",
            "order_number",
            "order_date",
            "order_time",
            "material",
            "weight",
            "quantity",
            "rate",
            "total",
            "location",
            "truck_number",
            "delivery_boy_name",
            "delivery_boy_mobile",
            "notes",
            "created_by",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["total", "created_by"]

    def validate_material(self, value):
        value = (value or "").strip().upper()
        if not value:
            raise serializers.ValidationError("Material is required.")
        if value not in Order.Material.values and not MaterialRate.objects.filter(material__iexact=value).exists():
            raise serializers.ValidationError(f"Unknown material {value}.")
        return value

    def validate_weight(self, value):
        if value is None or value <= Decimal("0"):
            raise serializers.ValidationError("Weight must be greater than 0.")
        return value

    def validate_quantity(self, value):
        if value is not None and value < Decimal("0"):
            raise serializers.ValidationError("Quantity cannot be negative.")
        return value

    def validate_rate(self, value):
        if value is not None and value < Decimal("0"):
            raise serializers.ValidationError("Rate cannot be negative.")
        return value

    def validate(self, attrs):
        attrs = super().validate(attrs)
        # Prefill the rate from the current material rate when none was entered.
        if attrs.get("rate") is None and (self.instance is None or "material" in attrs):
            material = attrs.get("material") or getattr(self.instance, "material", "")
            if self.instance is not None and "rate" not in attrs and material == self.instance.material:
                return attrs
            rate = MaterialRate.rate_for(material)
            if rate is None:
                raise serializers.ValidationError({"rate": f"No rate configured for {material}; enter a rate."})
            attrs["rate"] = rate
        return attrs

    def create(self, validated_data):
        return save_order_and_rebalance(Order(**validated_data))

    def update(self, instance, validated_data):
        previous_client_id = instance.client_id
        for field, value in validated_data.items():
            setattr(instance, field, value)
        return save_order_and_rebalance(instance, previous_client_id=previous_client_id)
