from decimal import Decimal

from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

	initial = True

	dependencies = [
		("clients", "0001_initial"),
		("orders", "0001_initial"),
		migrations.swappable_dependency(settings.AUTH_USER_MODEL),
	]

	operations = [
		migrations.CreateModel(
			name="Invoice",
			fields=[
				("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
				("invoice_number", models.CharField(max_length=60, unique=True)),
				("bill_month", models.DateField()),
				("orders_total", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14)),
				("previous_balance", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14)),
				("paid_amount", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14)),
				("total_payable", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14)),
				("remaining_balance", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14)),
				("notes", models.TextField(blank=True, default="")),
				("created_at", models.DateTimeField(auto_now_add=True)),
				("updated_at", models.DateTimeField(auto_now=True)),
				(
					"client",
					models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="invoices", to="clients.client"),
				),
				(
					"created_by",
					models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, to=settings.AUTH_USER_MODEL),
				),
			],
			options={
				"ordering": ["-created_at", "-id"],
			},
		),
		migrations.AddIndex(
			model_name="invoice",
			index=models.Index(fields=["client", "bill_month"], name="invoices_client_month_idx"),
		),
		migrations.CreateModel(
			name="InvoiceItem",
			fields=[
				("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
				("description", models.CharField(max_length=255)),
				("location", models.CharField(blank=True, default="", max_length=255)),
				("quantity", models.DecimalField(decimal_places=3, default=Decimal("0.00"), max_digits=12)),
				("rate", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=12)),
				("amount", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14)),
				(
					"invoice",
					models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="items", to="invoices.invoice"),
				),
				(
					"order",
					models.ForeignKey(
						blank=True,
						null=True,
						on_delete=django.db.models.deletion.SET_NULL,
						related_name="invoice_items",
						to="orders.order",
					),
				),
			],
			options={
				"ordering": ["id"],
			},
		),
	]
