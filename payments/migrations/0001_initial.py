from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion
import django.utils.timezone


class Migration(migrations.Migration):

	initial = True

	dependencies = [
		("clients", "0001_initial"),
		migrations.swappable_dependency(settings.AUTH_USER_MODEL),
	]

	operations = [
		migrations.CreateModel(
			name="Payment",
			fields=[
				("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
				("payment_date", models.DateField(default=django.utils.timezone.localdate)),
				("amount", models.DecimalField(decimal_places=2, max_digits=14)),
				("mode", models.CharField(choices=[("Cash", "Cash"), ("UPI", "UPI"), ("Bank", "Bank")], default="Cash", max_length=10)),
				("receipt_number", models.CharField(blank=True, db_index=True, default="", max_length=40)),
				("notes", models.TextField(blank=True, default="")),
				("created_at", models.DateTimeField(auto_now_add=True)),
				(
					"client",
					models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="payments", to="clients.client"),
				),
				(
					"created_by",
					models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, to=settings.AUTH_USER_MODEL),
				),
			],
			options={
				"ordering": ["-payment_date", "-id"],
			},
		),
		migrations.AddIndex(
			model_name="payment",
			index=models.Index(fields=["client", "payment_date"], name="payments_client_date_idx"),
		),
	]
