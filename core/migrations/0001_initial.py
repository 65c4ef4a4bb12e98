from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

	initial = True

	dependencies = [
		("clients", "0001_initial"),
		migrations.swappable_dependency(settings.AUTH_USER_MODEL),
	]

	operations = [
		migrations.CreateModel(
			name="CompanySettings",
			fields=[
				("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
				("company_name", models.CharField(default="", max_length=255)),
				("address", models.TextField(blank=True, default="")),
				("phone", models.CharField(blank=True, default="", max_length=50)),
				("gst_number", models.CharField(blank=True, default="", max_length=20)),
				("bank_name", models.CharField(blank=True, default="", max_length=120)),
				("account_number", models.CharField(blank=True, default="", max_length=40)),
				("ifsc_code", models.CharField(blank=True, default="", max_length=20)),
				("upi_id", models.CharField(blank=True, default="", max_length=120)),
				("logo_url", models.URLField(blank=True, default="")),
				("invoice_prefix", models.CharField(blank=True, default="", max_length=20)),
				("next_invoice_number", models.PositiveIntegerField(default=1)),
				("updated_at", models.DateTimeField(auto_now=True)),
			],
			options={
				"verbose_name": "company settings",
				"verbose_name_plural": "company settings",
			},
		),
		migrations.CreateModel(
			name="AuditEvent",
			fields=[
				("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
				(
					"action",
					models.CharField(
						choices=[
							("order_created", "Order created"),
							("order_updated", "Order updated"),
							("order_deleted", "Order deleted"),
							("payment_recorded", "Payment recorded"),
							("payment_updated", "Payment updated"),
							("payment_deleted", "Payment deleted"),
							("invoice_created", "Invoice created"),
							("invoice_deleted", "Invoice deleted"),
							("balance_recomputed", "Balance recomputed"),
						],
						max_length=50,
					),
				),
				("entity_type", models.CharField(max_length=50)),
				("entity_id", models.PositiveIntegerField(blank=True, null=True)),
				("summary", models.CharField(blank=True, max_length=255)),
				("meta", models.JSONField(blank=True, default=dict)),
				("created_at", models.DateTimeField(auto_now_add=True)),
				(
					"actor",
					models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, to=settings.AUTH_USER_MODEL),
				),
				(
					"client",
					models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, to="clients.client"),
				),
			],
			options={
				"ordering": ["-created_at"],
			},
		),
	]
