"""Monthly invoice computation.

Totals for a client and month are derived from the orders and payments on
record; the invoice number comes from the counter on CompanySettings.
"""
from __future__ import annotations

from datetime import date
from decimal import Decimal
import logging

from django.db import transaction
from django.db.models import Sum
from rest_framework.exceptions import ValidationError

from core.filters import month_bounds
from core.models import CompanySettings
from orders.models import Order
from payments.models import Payment

from .models import Invoice, InvoiceItem


logger = logging.getLogger(__name__)

ZERO = Decimal("0.00")
NO_ORDERS_MESSAGE = "No orders found for the selected period"


def compute_total_payable(orders_total, previous_balance, paid_amount) -> Decimal:
	total = (orders_total or ZERO) + (previous_balance or ZERO) - (paid_amount or ZERO)
	return Decimal(total).quantize(Decimal("0.01"))


def invoice_number_for(n: int, bill_month: date, prefix: str = "") -> str:
	"""e.g. 7, March 2025 -> "7-3-25/26" (prefix prepended when configured)."""
	yy = bill_month.year % 100
	return f"{prefix or ''}{n}-{bill_month.month}-{yy:02d}/{(yy + 1) % 100:02d}"


def previous_balance_for(client, month_start: date) -> Decimal:
	"""Amount due carried into `month_start`."""
	orders_before = Order.objects.filter(client=client, order_date__lt=month_start).aggregate(t=Sum("total"))["t"] or ZERO
	payments_before = Payment.objects.filter(client=client, payment_date__lt=month_start).aggregate(t=Sum("amount"))["t"] or ZERO
	return ((client.opening_balance or ZERO) + orders_before - payments_before).quantize(Decimal("0.01"))


def _item_from_order(order: Order) -> dict:
	return {
		"order": order,
		"description": order.material,
		"location": order.location or "",
		"quantity": order.billed_quantity,
		"rate": order.rate,
		"amount": order.total,
	}


def build_invoice_preview(client, month) -> dict:
	"""Compute an invoice for `client` and `month` without saving anything.

	Raises ValidationError when the client has no orders in the month.
	"""
	start, end = month_bounds(month)
	orders = list(
		Order.objects.filter(client=client, order_date__gte=start, order_date__lt=end).order_by("order_date", "order_time", "id")
	)
	if not orders:
		raise ValidationError(NO_ORDERS_MESSAGE)

	paid_amount = Payment.objects.filter(client=client, payment_date__gte=start, payment_date__lt=end).aggregate(t=Sum("amount"))["t"] or ZERO
	orders_total = sum((o.total for o in orders), ZERO)
	previous_balance = previous_balance_for(client, start)
	total_payable = compute_total_payable(orders_total, previous_balance, paid_amount)

	company = CompanySettings.load()
	return {
		"client": client,
		"bill_month": start,
		"invoice_number": invoice_number_for(company.next_invoice_number, start, company.invoice_prefix),
		"orders_total": orders_total,
		"previous_balance": previous_balance,
		"paid_amount": paid_amount,
		"total_payable": total_payable,
		"remaining_balance": total_payable,
		"items": [_item_from_order(o) for o in orders],
	}


def generate_invoice(client, month, *, created_by=None, notes: str = "") -> Invoice:
	"""Create and number an invoice; the counter is consumed in the same transaction."""
	with transaction.atomic():
		company = CompanySettings.objects.select_for_update().filter(pk=CompanySettings.SINGLETON_PK).first()
		if company is None:
			CompanySettings.load()
			company = CompanySettings.objects.select_for_update().get(pk=CompanySettings.SINGLETON_PK)

		preview = build_invoice_preview(client, month)
		number = invoice_number_for(company.next_invoice_number, preview["bill_month"], company.invoice_prefix)
		if Invoice.objects.filter(invoice_number=number).exists():
			raise ValidationError(f"Invoice number {number} is already in use; adjust the next invoice number in settings.")

		invoice = Invoice.objects.create(
			client=client,
			invoice_number=number,
			bill_month=preview["bill_month"],
			orders_total=preview["orders_total"],
			previous_balance=preview["previous_balance"],
			paid_amount=preview["paid_amount"],
			total_payable=preview["total_payable"],
			remaining_balance=preview["remaining_balance"],
			notes=notes or "",
			created_by=created_by if getattr(created_by, "is_authenticated", False) else None,
		)
		InvoiceItem.objects.bulk_create([InvoiceItem(invoice=invoice, **item) for item in preview["items"]])

		company.next_invoice_number += 1
		company.save(update_fields=["next_invoice_number", "updated_at"])

	logger.info("Invoice %s generated for client %s (%s)", invoice.invoice_number, client.pk, invoice.total_payable)
	return invoice
