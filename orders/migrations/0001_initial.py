from decimal import Decimal

from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion
import django.utils.timezone

import orders.models


class Migration(migrations.Migration):

	initial = True

	dependencies = [
		("clients", "0001_initial"),
		migrations.swappable_dependency(settings.AUTH_USER_MODEL),
	]

	operations = [
		migrations.CreateModel(
			name="MaterialRate",
			fields=[
				("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
				("material", models.CharField(max_length=60, unique=True)),
				("rate", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=12)),
				("updated_at", models.DateTimeField(auto_now=True)),
			],
			options={
				"ordering": ["material"],
			},
		),
		migrations.CreateModel(
			name="Vehicle",
			fields=[
				("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
				("vehicle_number", models.CharField(max_length=30, unique=True)),
				("created_at", models.DateTimeField(auto_now_add=True)),
			],
			options={
				"ordering": ["vehicle_number"],
			},
		),
		migrations.CreateModel(
			name="Order",
			fields=[
				("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
				("order_number", models.CharField(blank=True, db_index=True, default="", max_length=40)),
				("order_date", models.DateField(default=django.utils.timezone.localdate)),
				("order_time", models.TimeField(default=orders.models._local_time)),
				("material", models.CharField(max_length=60)),
				("weight", models.DecimalField(decimal_places=3, max_digits=12)),
				("quantity", models.DecimalField(blank=True, decimal_places=3, max_digits=12, null=True)),
				("rate", models.DecimalField(decimal_places=2, max_digits=12)),
				("total", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14)),
				("location", models.CharField(blank=True, default="", max_length=255)),
				("truck_number", models.CharField(blank=True, default="", max_length=30)),
				("delivery_boy_name", models.CharField(blank=True, default="", max_length=120)),
				("delivery_boy_mobile", models.CharField(blank=True, default="", max_length=20)),
				("notes", models.TextField(blank=True, default="")),
				("created_at", models.DateTimeField(auto_now_add=True)),
				("updated_at", models.DateTimeField(auto_now=True)),
				(
					"client",
					models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="orders", to="clients.client"),
				),
				(
					"created_by",
					models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, to=settings.AUTH_USER_MODEL),
				),
			],
			options={
				"ordering": ["-order_date", "-order_time", "-id"],
			},
		),
		migrations.AddIndex(
			model_name="order",
			index=models.Index(fields=["client", "order_date"], name="orders_client_date_idx"),
		),
	]
