from decimal import Decimal
import logging

from django.db import models, transaction
from django.db.models import Sum


logger = logging.getLogger(__name__)

ZERO = Decimal("0.00")


class Client(models.Model):
	name = models.CharField(max_length=255)
	city = models.CharField(max_length=120)
	phone = models.CharField(max_length=20)

	address = models.CharField(max_length=255, blank=True, default="")
	state = models.CharField(max_length=120, blank=True, default="")
	pincode = models.CharField(max_length=10, blank=True, default="")
	gst_number = models.CharField(max_length=15, blank=True, default="")

	opening_balance = models.DecimalField(max_digits=14, decimal_places=2, default=ZERO)
	# Maintained by recompute_balance(); never written directly by API clients.
	current_balance = models.DecimalField(max_digits=14, decimal_places=2, default=ZERO)

	created_at = models.DateTimeField(auto_now_add=True)
	updated_at = models.DateTimeField(auto_now=True)

	class Meta:
		ordering = ["name"]

	def __str__(self):
		return f"{self.name} ({self.city})" if self.city else self.name

	def save(self, *args, **kwargs):
		if self._state.adding:
			self.current_balance = self.opening_balance or ZERO
		super().save(*args, **kwargs)

	def orders_total(self) -> Decimal:
		return self.orders.aggregate(total=Sum("total")).get("total") or ZERO

	def payments_total(self) -> Decimal:
		return self.payments.aggregate(total=Sum("amount")).get("total") or ZERO

	def computed_balance(self) -> Decimal:
		"""Ledger balance: orders draw it down, payments bring it back up."""
		return ((self.opening_balance or ZERO) - self.orders_total() + self.payments_total()).quantize(Decimal("0.01"))

	def amount_due(self) -> Decimal:
		"""What the client owes: opening balance plus orders minus payments."""
		return ((self.opening_balance or ZERO) + self.orders_total() - self.payments_total()).quantize(Decimal("0.01"))

	@classmethod
	def recompute_balance(cls, client_id) -> Decimal:
		"""Recompute and store current_balance from the full ledger.

		Locks the client row for the rest of the surrounding transaction so two
		concurrent order/payment writes for the same client serialize here
		instead of overwriting each other's adjustment.
		"""
		with transaction.atomic():
			client = cls.objects.select_for_update().get(pk=client_id)
			previous = client.current_balance
			balance = client.computed_balance()
			if balance != previous:
				client.current_balance = balance
				client.save(update_fields=["current_balance", "updated_at"])
				logger.info("Client %s balance %s -> %s", client.pk, previous, balance)
		return balance

	def statement(self) -> dict:
		"""Date-ordered ledger with a running amount due."""
		entries = []
		for order in self.orders.all().order_by("order_date", "order_time", "id"):
			entries.append({
				"date": order.order_date,
				"type": "order",
				"id": order.pk,
				"reference": order.order_number,
				"description": f"{order.material} {order.weight} MT @ {order.rate}",
				"debit": order.total,
				"credit": ZERO,
			})
		for payment in self.payments.all().order_by("payment_date", "id"):
			entries.append({
				"date": payment.payment_date,
				"type": "payment",
				"id": payment.pk,
				"reference": payment.receipt_number,
				"description": f"Payment ({payment.mode})",
				"debit": ZERO,
				"credit": payment.amount,
			})
		# Same-day orders are listed before payments.
		entries.sort(key=lambda e: (e["date"], 0 if e["type"] == "order" else 1, e["id"]))

		running = self.opening_balance or ZERO
		for entry in entries:
			running = running + entry["debit"] - entry["credit"]
			entry["amount_due"] = running

		orders_total = sum((e["debit"] for e in entries), ZERO)
		payments_total = sum((e["credit"] for e in entries), ZERO)
		return {
			"client": self.pk,
			"opening_balance": self.opening_balance,
			"orders_total": orders_total,
			"payments_total": payments_total,
			"current_balance": self.current_balance,
			"amount_due": running,
			"entries": entries,
		}
