from rest_framework import serializers

from .models import CompanySettings


class CompanySettingsSerializer(serializers.ModelSerializer):
    class Meta:
        model = CompanySettings
        fields = [
            "id",
            "company_name",
            "address",
            "phone",
            "gst_number",
            "bank_name",
            "account_number",
            "ifsc_code",
            "upi_id",
            "logo_url",
            "invoice_prefix",
            "next_invoice_number",
            "updated_at",
        ]
        read_only_fields = ["id", "updated_at"]

    def validate_next_invoice_number(self, value):
        if value < 1:
            raise serializers.ValidationError("Invoice counter must start at 1 or higher.")
        return value
