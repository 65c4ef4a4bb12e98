from datetime import date
from decimal import Decimal
from types import SimpleNamespace

from django.test import SimpleTestCase, TestCase
from rest_framework.test import APIClient

from accounts.models import User
from clients.models import Client
from orders.models import Order, save_order_and_rebalance
from payments.models import Payment, save_payment_and_rebalance

from . import summaries


def _order(pk, client_id, material, weight, rate, order_date=date(2025, 3, 10)):
	weight, rate = Decimal(weight), Decimal(rate)
	return SimpleNamespace(
		pk=pk,
		client_id=client_id,
		material=material,
		weight=weight,
		rate=rate,
		total=(weight * rate).quantize(Decimal("0.01")),
		order_date=order_date,
		order_number=f"ORD-{pk}",
	)


def _payment(client_id, amount, payment_date=date(2025, 3, 20)):
	return SimpleNamespace(client_id=client_id, amount=Decimal(amount), payment_date=payment_date)


def _client(pk, name, opening="0"):
	return SimpleNamespace(pk=pk, name=name, city="Pune", opening_balance=Decimal(opening))


class SummaryFunctionTests(SimpleTestCase):
	def setUp(self):
		self.clients = [_client(1, "Patil", "1000"), _client(2, "Jadhav"), _client(3, "Kale", "-200")]
		self.orders = [
			_order(1, 1, "RETI", "10", "1400"),
			_order(2, 1, "RETI", "5", "1500"),
			_order(3, 2, "GSB", "8", "650", date(2025, 2, 27)),
			_order(4, 2, "KAPCHI", "2", "900"),
		]
		self.payments = [_payment(1, "20000"), _payment(2, "1000", date(2025, 2, 28))]

	def test_material_wise_sums_and_omits_unused_materials(self):
		report = summaries.material_wise(self.orders)
		rows = {r["material"]: r for r in report["rows"]}
		self.assertEqual([r["material"] for r in report["rows"]], ["RETI", "KAPCHI", "GSB"])
		self.assertNotIn("RABAR", rows)
		self.assertEqual(rows["RETI"]["order_count"], 2)
		self.assertEqual(rows["RETI"]["total_weight"], Decimal("15"))
		self.assertEqual(rows["RETI"]["total_amount"], Decimal("21500.00"))
		self.assertEqual(rows["RETI"]["average_rate"], Decimal("1450.00"))
		self.assertEqual(report["totals"]["order_count"], 4)
		self.assertEqual(report["totals"]["total_amount"], Decimal("28500.00"))

	def test_filters(self):
		self.assertEqual(len(summaries.filter_orders(self.orders, month="2025-03")), 3)
		self.assertEqual(len(summaries.filter_orders(self.orders, client_id=2, material="gsb")), 1)
		self.assertEqual(len(summaries.filter_payments(self.payments, month="2025-02", client_id="2")), 1)

	def test_client_wise(self):
		rows = {r["client_id"]: r for r in summaries.client_wise(self.clients, self.orders, self.payments)}
		self.assertEqual(rows[1]["order_count"], 2)
		self.assertEqual(rows[1]["pending_balance"], Decimal("2500.00"))
		self.assertEqual(rows[2]["pending_balance"], Decimal("6000.00"))
		self.assertEqual(rows[3]["pending_balance"], Decimal("-200"))
		self.assertEqual(len(summaries.client_wise(self.clients, self.orders, self.payments, client_id=3)), 1)

	def test_pending_only_positive_and_sorted_descending(self):
		rows = summaries.pending_payments(self.clients, self.orders, self.payments)
		self.assertEqual([r["client_name"] for r in rows], ["Jadhav", "Patil"])
		self.assertTrue(all(r["month"] == "All" for r in rows))

	def test_pending_for_a_month_counts_only_that_month(self):
		rows = summaries.pending_payments(self.clients, self.orders, self.payments, month="2025-03")
		by_name = {r["client_name"]: r["pending_balance"] for r in rows}
		self.assertEqual(by_name, {"Patil": Decimal("2500.00"), "Jadhav": Decimal("1800.00")})
		self.assertEqual(rows[0]["month"], "2025-03")

	def test_dashboard_summary(self):
		summary = summaries.dashboard_summary(self.clients, self.orders, self.payments, today=date(2025, 3, 10))
		self.assertEqual(summary["client_count"], 3)
		self.assertEqual(summary["today_orders"], 3)
		self.assertEqual(summary["total_revenue"], Decimal("28500.00"))
		self.assertEqual(summary["total_payments"], Decimal("21000"))
		self.assertEqual(summary["material_weight"]["RABAR"], Decimal("0"))
		self.assertEqual(summary["top_clients"][0]["client_name"], "Jadhav")
		self.assertEqual(len(summary["recent_orders"]), 4)


class ReportApiTests(TestCase):
	def setUp(self):
		self.staff = User.objects.create_user(email="staff@example.com", password="pass12345", role=User.Role.STAFF)
		self.api = APIClient()
		self.api.force_authenticate(self.staff)
		self.patil = Client.objects.create(name="Patil", city="Pune", phone="9822000001")
		self.kale = Client.objects.create(name="Kale", city="Daund", phone="9822000002")
		for client, material, weight in ((self.patil, "RETI", "10"), (self.patil, "GSB", "4"), (self.kale, "RETI", "2")):
			save_order_and_rebalance(
				Order(client=client, material=material, weight=Decimal(weight), rate=Decimal("100"), order_date=date(2025, 3, 5))
			)
		save_payment_and_rebalance(Payment(client=self.kale, amount=Decimal("500"), payment_date=date(2025, 3, 6)))

	def test_material_wise_endpoint(self):
		res = self.api.get("/api/reports/material-wise/", {"month": "2025-03", "client": self.patil.pk})
		self.assertEqual(res.status_code, 200)
		self.assertEqual([r["material"] for r in res.data["rows"]], ["RETI", "GSB"])
		self.assertEqual(res.data["totals"]["total_amount"], Decimal("1400.00"))

	def test_pending_endpoint(self):
		res = self.api.get("/api/reports/pending/")
		self.assertEqual([r["client_name"] for r in res.data["rows"]], ["Patil"])

	def test_summary_endpoint(self):
		res = self.api.get("/api/reports/summary/")
		self.assertEqual(res.status_code, 200)
		self.assertEqual(res.data["order_count"], 3)
		self.assertEqual(res.data["total_amount_due"], Decimal("1100.00"))

	def test_unknown_report_is_404(self):
		res = self.api.get("/api/reports/profit/")
		self.assertEqual(res.status_code, 404)
		self.assertEqual(res.data, {"error": "Not found."})

	def test_csv_export(self):
		res = self.api.get("/api/reports/client-wise/csv/")
		self.assertEqual(res.status_code, 200)
		lines = res.content.decode().strip().splitlines()
		self.assertTrue(lines[0].startswith("Client,City,Orders"))
		self.assertEqual(len(lines), 3)

	def test_pdf_export(self):
		res = self.api.get("/api/reports/material-wise/pdf/", {"month": "2025-03"})
		self.assertEqual(res.status_code, 200)
		self.assertTrue(res.content.startswith(b"%PDF"))
