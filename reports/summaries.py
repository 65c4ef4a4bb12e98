"""Report aggregation over already-fetched orders, payments and clients.

The functions here take plain sequences (model instances or anything with the
same attributes) and never touch the database, so views fetch once and the
math stays testable on its own.
"""
from __future__ import annotations

from collections import defaultdict
from datetime import date, time
from decimal import Decimal
from typing import Iterable, Sequence

from django.conf import settings

from core.filters import month_bounds


ZERO = Decimal("0.00")


def _in_month(value: date, month) -> bool:
	start, end = month_bounds(month)
	return start <= value < end


def _client_id(obj):
	return getattr(obj, "client_id", None)


def filter_orders(orders: Iterable, *, month=None, client_id=None, material: str | None = None) -> list:
	material = (material or "").strip().upper()
	out = []
	for order in orders:
		if client_id is not None and _client_id(order) != int(client_id):
			continue
		if material and (order.material or "").upper() != material:
			continue
		if month and not _in_month(order.order_date, month):
			continue
		out.append(order)
	return out


def filter_payments(payments: Iterable, *, month=None, client_id=None) -> list:
	out = []
	for payment in payments:
		if client_id is not None and _client_id(payment) != int(client_id):
			continue
		if month and not _in_month(payment.payment_date, month):
			continue
		out.append(payment)
	return out


def material_wise(orders: Sequence, materials: Sequence[str] | None = None) -> dict:
	"""Per-material count, weight, amount and average rate; empty materials are left out."""
	materials = list(materials or settings.MATERIAL_TYPES)
	rows = []
	for material in materials:
		matched = [o for o in orders if (o.material or "").upper() == material]
		if not matched:
			continue
		weight = sum((Decimal(o.weight) for o in matched), Decimal("0"))
		amount = sum((Decimal(o.total) for o in matched), ZERO)
		average_rate = sum((Decimal(o.rate) for o in matched), ZERO) / len(matched)
		rows.append(
			{
				"material": material,
				"order_count": len(matched),
				"total_weight": weight,
				"total_amount": amount,
				"average_rate": average_rate.quantize(Decimal("0.01")),
			}
		)
	return {
		"rows": rows,
		"totals": {
			"order_count": sum(r["order_count"] for r in rows),
			"total_weight": sum((r["total_weight"] for r in rows), Decimal("0")),
			"total_amount": sum((r["total_amount"] for r in rows), ZERO),
		},
	}


def _sums_by_client(orders: Iterable, payments: Iterable):
	order_count = defaultdict(int)
	weight = defaultdict(lambda: Decimal("0"))
	order_total = defaultdict(lambda: ZERO)
	payment_total = defaultdict(lambda: ZERO)
	for order in orders:
		cid = _client_id(order)
		order_count[cid] += 1
		weight[cid] += Decimal(order.weight)
		order_total[cid] += Decimal(order.total)
	for payment in payments:
		payment_total[_client_id(payment)] += Decimal(payment.amount)
	return order_count, weight, order_total, payment_total


def client_wise(clients: Sequence, orders: Sequence, payments: Sequence, client_id=None) -> list[dict]:
	if client_id is not None:
		clients = [c for c in clients if c.pk == int(client_id)]
	order_count, weight, order_total, payment_total = _sums_by_client(orders, payments)
	rows = []
	for client in clients:
		opening = Decimal(client.opening_balance or ZERO)
		rows.append(
			{
				"client_id": client.pk,
				"client_name": client.name,
				"city": client.city,
				"order_count": order_count[client.pk],
				"total_weight": weight[client.pk],
				"total_orders": order_total[client.pk],
				"total_payments": payment_total[client.pk],
				"opening_balance": opening,
				"pending_balance": opening + order_total[client.pk] - payment_total[client.pk],
			}
		)
	return rows


def pending_payments(clients: Sequence, orders: Sequence, payments: Sequence, client_id=None, month=None) -> list[dict]:
	"""Clients that still owe money, largest balance first.

	With `month`, only that month's orders and payments count against the
	opening balance.
	"""
	if month:
		orders = filter_orders(orders, month=month)
		payments = filter_payments(payments, month=month)
	label = f"{month_bounds(month)[0]:%Y-%m}" if month else "All"
	rows = [
		{**row, "month": label}
		for row in client_wise(clients, orders, payments, client_id=client_id)
		if row["pending_balance"] > 0
	]
	rows.sort(key=lambda r: r["pending_balance"], reverse=True)
	return rows


def dashboard_summary(clients: Sequence, orders: Sequence, payments: Sequence, *, today: date | None = None) -> dict:
	today = today or date.today()
	per_client = client_wise(clients, orders, payments)
	total_revenue = sum((Decimal(o.total) for o in orders), ZERO)
	total_payments = sum((Decimal(p.amount) for p in payments), ZERO)

	material_weight = {material: Decimal("0") for material in settings.MATERIAL_TYPES}
	for order in orders:
		key = (order.material or "").upper()
		material_weight[key] = material_weight.get(key, Decimal("0")) + Decimal(order.weight)

	top_clients = sorted(per_client, key=lambda r: r["pending_balance"], reverse=True)[:5]
	recent = sorted(orders, key=lambda o: (o.order_date, getattr(o, "order_time", None) or time.min, o.pk), reverse=True)[:5]
	return {
		"client_count": len(clients),
		"order_count": len(orders),
		"today_orders": sum(1 for o in orders if o.order_date == today),
		"total_revenue": total_revenue,
		"total_payments": total_payments,
		"total_amount_due": sum((r["pending_balance"] for r in per_client), ZERO),
		"material_weight": material_weight,
		"top_clients": [
			{"client_id": r["client_id"], "client_name": r["client_name"], "amount_due": r["pending_balance"]}
			for r in top_clients
		],
		"recent_orders": [
			{
				"id": o.pk,
				"order_number": getattr(o, "order_number", ""),
				"order_date": o.order_date,
				"client_id": _client_id(o),
				"material": o.material,
				"weight": o.weight,
				"total": o.total,
			}
			for o in recent
		],
	}
