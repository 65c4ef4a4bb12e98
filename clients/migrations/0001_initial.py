from decimal import Decimal

from django.db import migrations, models


class Migration(migrations.Migration):

	initial = True

	dependencies = []

	operations = [
		migrations.CreateModel(
			name="Client",
			fields=[
				("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
				("name", models.CharField(max_length=255)),
				("city", models.CharField(max_length=120)),
				("phone", models.CharField(max_length=20)),
				("address", models.CharField(blank=True, default="", max_length=255)),
				("state", models.CharField(blank=True, default="", max_length=120)),
				("pincode", models.CharField(blank=True, default="", max_length=10)),
				("gst_number", models.CharField(blank=True, default="", max_length=15)),
				("opening_balance", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14)),
				("current_balance", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14)),
				("created_at", models.DateTimeField(auto_now_add=True)),
				("updated_at", models.DateTimeField(auto_now=True)),
			],
			options={
				"ordering": ["name"],
			},
		),
	]
