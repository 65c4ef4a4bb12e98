from decimal import Decimal

from django.conf import settings
from django.db import models, transaction
from django.utils import timezone


class Payment(models.Model):
	class Mode(models.TextChoices):
		CASH = "Cash", "Cash"
		UPI = "UPI", "UPI"
		BANK = "Bank", "Bank"

	client = models.ForeignKey("clients.Client", on_delete=models.PROTECT, related_name="payments")
	payment_date = models.DateField(default=timezone.localdate)
	amount = models.DecimalField(max_digits=14, decimal_places=2)
	mode = models.CharField(max_length=10, choices=Mode.choices, default=Mode.CASH)
	receipt_number = models.CharField(max_length=40, blank=True, default="", db_index=True)
	notes = models.TextField(blank=True, default="")

	created_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True)
	created_at = models.DateTimeField(auto_now_add=True)

	class Meta:
		ordering = ["-payment_date", "-id"]
		indexes = [
			models.Index(fields=["client", "payment_date"], name="payments_client_date_idx"),
		]

	def __str__(self):
		return f"{self.receipt_number or self.pk} {self.amount} {self.mode}"

	def save(self, *args, **kwargs):
		super().save(*args, **kwargs)

		# Generate a stable receipt number after PK exists.
		if not self.receipt_number and self.pk:
			receipt_number = f"RCPT-{self.payment_date:%Y%m%d}-{self.pk:06d}"
			Payment.objects.filter(pk=self.pk, receipt_number="").update(receipt_number=receipt_number)
			self.receipt_number = receipt_number


def save_payment_and_rebalance(payment: Payment, *, previous_client_id=None) -> Payment:
	"""Persist a payment and recompute the affected client balances atomically."""
	from clients.models import Client

	if payment.amount is None or payment.amount <= Decimal("0.00"):
		raise ValueError("Payment amount must be greater than 0.")
	with transaction.atomic():
		payment.save()
		Client.recompute_balance(payment.client_id)
		if previous_client_id and previous_client_id != payment.client_id:
			Client.recompute_balance(previous_client_id)
	return payment


def delete_payment_and_rebalance(payment: Payment) -> None:
	from clients.models import Client

	client_id = payment.client_id
	with transaction.atomic():
		payment.delete()
		Client.recompute_balance(client_id)
