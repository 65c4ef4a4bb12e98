from decimal import Decimal

from django.conf import settings
from django.db import models
from django.db.models import Sum


ZERO = Decimal("0.00")


class Invoice(models.Model):
	client = models.ForeignKey("clients.Client", on_delete=models.PROTECT, related_name="invoices")
	invoice_number = models.CharField(max_length=60, unique=True)
	# First day of the billed month.
	bill_month = models.DateField()

	orders_total = models.DecimalField(max_digits=14, decimal_places=2, default=ZERO)
	previous_balance = models.DecimalField(max_digits=14, decimal_places=2, default=ZERO)
	paid_amount = models.DecimalField(max_digits=14, decimal_places=2, default=ZERO)
	total_payable = models.DecimalField(max_digits=14, decimal_places=2, default=ZERO)
	remaining_balance = models.DecimalField(max_digits=14, decimal_places=2, default=ZERO)

	notes = models.TextField(blank=True, default="")
	created_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True)
	created_at = models.DateTimeField(auto_now_add=True)
	updated_at = models.DateTimeField(auto_now=True)

	class Meta:
		ordering = ["-created_at", "-id"]
		indexes = [
			models.Index(fields=["client", "bill_month"], name="invoices_client_month_idx"),
		]

	def __str__(self):
		return self.invoice_number or f"Invoice #{self.pk}"

	def recalculate_totals(self, *, save: bool = True) -> None:
		"""Re-derive orders_total from the items and refresh the payable figures."""
		from .billing import compute_total_payable

		self.orders_total = (self.items.aggregate(total=Sum("amount"))["total"] or ZERO).quantize(Decimal("0.01"))
		self.total_payable = compute_total_payable(self.orders_total, self.previous_balance, self.paid_amount)
		self.remaining_balance = self.total_payable
		if save:
			self.save(update_fields=["orders_total", "total_payable", "remaining_balance", "updated_at"])


class InvoiceItem(models.Model):
	invoice = models.ForeignKey(Invoice, on_delete=models.CASCADE, related_name="items")
	order = models.ForeignKey("orders.Order", on_delete=models.SET_NULL, null=True, blank=True, related_name="invoice_items")
	description = models.CharField(max_length=255)
	location = models.CharField(max_length=255, blank=True, default="")
	quantity = models.DecimalField(max_digits=12, decimal_places=3, default=ZERO)
	rate = models.DecimalField(max_digits=12, decimal_places=2, default=ZERO)
	amount = models.DecimalField(max_digits=14, decimal_places=2, default=ZERO)

	class Meta:
		ordering = ["id"]

	def __str__(self):
		return self.description
