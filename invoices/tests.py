from datetime import date
from decimal import Decimal

from django.conf import settings
from django.test import TestCase
from rest_framework.exceptions import ValidationError
from rest_framework.test import APIClient

from accounts.models import User
from clients.models import Client
from core.models import CompanySettings
from core.pdf import invoice_item_rows, upi_payment_uri, upi_qr_drawing
from orders.models import Order, save_order_and_rebalance
from payments.models import Payment, save_payment_and_rebalance

from .billing import build_invoice_preview, compute_total_payable, generate_invoice, invoice_number_for
from .models import Invoice, InvoiceItem


class BillingTests(TestCase):
	def setUp(self):
		self.client_obj = Client.objects.create(name="Patil Constructions", city="Pune", phone="9822000001")
		# February: 500 carried forward into March.
		self._order(date(2025, 2, 20), weight="1", rate="500")
		# March: 10 MT @ 1000 and a 2000 payment.
		self._order(date(2025, 3, 4), weight="4", rate="1000", location="Site A")
		self._order(date(2025, 3, 18), weight="6", rate="1000")
		save_payment_and_rebalance(Payment(client=self.client_obj, amount=Decimal("2000.00"), payment_date=date(2025, 3, 25)))

	def _order(self, order_date, weight, rate, **extra):
		return save_order_and_rebalance(
			Order(
				client=self.client_obj,
				material="RETI",
				weight=Decimal(weight),
				rate=Decimal(rate),
				order_date=order_date,
				**extra,
			)
		)

	def test_total_payable_formula(self):
		self.assertEqual(compute_total_payable(Decimal("10000"), Decimal("500"), Decimal("2000")), Decimal("8500.00"))

	def test_invoice_number_format(self):
		self.assertEqual(invoice_number_for(7, date(2025, 3, 1)), "7-3-25/26")
		self.assertEqual(invoice_number_for(12, date(2099, 11, 1), "SE/"), "SE/12-11-99/00")

	def test_preview_matches_worked_example(self):
		preview = build_invoice_preview(self.client_obj, "2025-03")
		self.assertEqual(preview["bill_month"], date(2025, 3, 1))
		self.assertEqual(preview["orders_total"], Decimal("10000.00"))
		self.assertEqual(preview["previous_balance"], Decimal("500.00"))
		self.assertEqual(preview["paid_amount"], Decimal("2000.00"))
		self.assertEqual(preview["total_payable"], Decimal("8500.00"))
		self.assertEqual(len(preview["items"]), 2)
		self.assertEqual(preview["items"][0]["location"], "Site A")

	def test_previous_balance_includes_opening_and_earlier_payments(self):
		Client.objects.filter(pk=self.client_obj.pk).update(opening_balance=Decimal("1000.00"))
		self.client_obj.refresh_from_db()
		save_payment_and_rebalance(Payment(client=self.client_obj, amount=Decimal("300.00"), payment_date=date(2025, 1, 5)))
		preview = build_invoice_preview(self.client_obj, date(2025, 3, 15))
		self.assertEqual(preview["previous_balance"], Decimal("1200.00"))

	def test_generate_consumes_the_counter(self):
		company = CompanySettings.load()
		company.next_invoice_number = 41
		company.invoice_prefix = "SE/"
		company.save()

		first = generate_invoice(self.client_obj, "2025-03")
		second = generate_invoice(self.client_obj, "2025-02")
		self.assertEqual(first.invoice_number, "SE/41-3-25/26")
		self.assertEqual(second.invoice_number, "SE/42-2-25/26")
		self.assertEqual(CompanySettings.load().next_invoice_number, 43)
		self.assertEqual(first.items.count(), 2)
		self.assertEqual(first.remaining_balance, first.total_payable)

	def test_month_without_orders_is_rejected_and_counter_untouched(self):
		with self.assertRaises(ValidationError):
			generate_invoice(self.client_obj, "2025-05")
		self.assertEqual(CompanySettings.load().next_invoice_number, 1)
		self.assertFalse(Invoice.objects.exists())

	def test_generating_an_invoice_does_not_touch_the_ledger(self):
		self.client_obj.refresh_from_db()
		before = self.client_obj.current_balance
		generate_invoice(self.client_obj, "2025-03")
		self.client_obj.refresh_from_db()
		self.assertEqual(self.client_obj.current_balance, before)


class InvoiceApiTests(TestCase):
	def setUp(self):
		self.admin = User.objects.create_user(email="admin@example.com", password="pass12345", role=User.Role.ADMIN)
		self.staff = User.objects.create_user(email="staff@example.com", password="pass12345", role=User.Role.STAFF)
		self.client_obj = Client.objects.create(
			name="Patil Constructions", city="Pune", phone="9822000001", gst_number="27ABCDE1234F1Z5"
		)
		save_order_and_rebalance(
			Order(client=self.client_obj, material="GSB", weight=Decimal("10"), rate=Decimal("650"), order_date=date(2025, 3, 3))
		)
		self.api = APIClient()
		self.api.force_authenticate(self.staff)

	def test_create_returns_invoice_with_items(self):
		res = self.api.post("/api/invoices/", {"client": self.client_obj.pk, "bill_month": "2025-03"}, format="json")
		self.assertEqual(res.status_code, 201)
		self.assertEqual(res.data["invoice_number"], "1-3-25/26")
		self.assertEqual(res.data["orders_total"], Decimal("6500.00"))
		self.assertEqual(res.data["total_payable"], Decimal("6500.00"))
		self.assertEqual(len(res.data["items"]), 1)
		self.assertEqual(res.data["items"][0]["description"], "GSB")

	def test_empty_month_returns_400_message(self):
		res = self.api.post("/api/invoices/", {"client": self.client_obj.pk, "bill_month": "2025-04-10"}, format="json")
		self.assertEqual(res.status_code, 400)
		self.assertEqual(res.data["error"], "No orders found for the selected period")

	def test_preview_does_not_consume_a_number(self):
		res = self.api.get("/api/invoices/preview/", {"client": self.client_obj.pk, "month": "2025-03"})
		self.assertEqual(res.status_code, 200)
		self.assertEqual(res.data["invoice_number"], "1-3-25/26")
		self.assertEqual(res.data["items"][0]["amount"], Decimal("6500.00"))
		self.assertFalse(Invoice.objects.exists())
		self.assertEqual(CompanySettings.load().next_invoice_number, 1)

	def test_patch_replaces_items_and_recomputes(self):
		invoice_id = self.api.post("/api/invoices/", {"client": self.client_obj.pk, "bill_month": "2025-03"}, format="json").data["id"]
		res = self.api.patch(
			f"/api/invoices/{invoice_id}/",
			{
				"previous_balance": "1000.00",
				"paid_amount": "500.00",
				"items": [
					{"description": "GSB", "quantity": "10", "rate": "600"},
					{"description": "Transport", "quantity": "1", "rate": "250", "amount": "250"},
				],
			},
			format="json",
		)
		self.assertEqual(res.status_code, 200)
		self.assertEqual(res.data["orders_total"], Decimal("6250.00"))
		self.assertEqual(res.data["total_payable"], Decimal("6750.00"))
		self.assertEqual(len(res.data["items"]), 2)

	def test_patch_rejects_items_without_description(self):
		invoice_id = self.api.post("/api/invoices/", {"client": self.client_obj.pk, "bill_month": "2025-03"}, format="json").data["id"]
		res = self.api.patch(f"/api/invoices/{invoice_id}/", {"items": [{"quantity": "1", "rate": "1"}]}, format="json")
		self.assertEqual(res.status_code, 400)
		self.assertIn("description", res.data["error"])
		res = self.api.patch(f"/api/invoices/{invoice_id}/", {"items": [{"description": "   ", "quantity": "1", "rate": "1"}]}, format="json")
		self.assertEqual(res.status_code, 400)
		invoice = Invoice.objects.get(pk=invoice_id)
		self.assertEqual(invoice.items.count(), 1)
		self.assertEqual(invoice.orders_total, Decimal("6500.00"))

	def test_patch_rejects_orders_of_another_client(self):
		other = Client.objects.create(name="Jadhav Infra", city="Satara", phone="9822000002")
		foreign = save_order_and_rebalance(
			Order(client=other, material="GSB", weight=Decimal("1"), rate=Decimal("650"), order_date=date(2025, 3, 4))
		)
		invoice_id = self.api.post("/api/invoices/", {"client": self.client_obj.pk, "bill_month": "2025-03"}, format="json").data["id"]
		res = self.api.patch(
			f"/api/invoices/{invoice_id}/",
			{"items": [{"order": foreign.pk, "description": "GSB", "quantity": "1", "rate": "650"}]},
			format="json",
		)
		self.assertEqual(res.status_code, 400)
		self.assertIn("another client", res.data["error"])
		self.assertFalse(Invoice.objects.get(pk=invoice_id).items.filter(order=foreign).exists())

	def test_invoice_number_cannot_be_patched(self):
		invoice_id = self.api.post("/api/invoices/", {"client": self.client_obj.pk, "bill_month": "2025-03"}, format="json").data["id"]
		self.api.patch(f"/api/invoices/{invoice_id}/", {"invoice_number": "X-1"}, format="json")
		self.assertEqual(Invoice.objects.get(pk=invoice_id).invoice_number, "1-3-25/26")

	def test_only_admin_deletes(self):
		invoice_id = self.api.post("/api/invoices/", {"client": self.client_obj.pk, "bill_month": "2025-03"}, format="json").data["id"]
		self.assertEqual(self.api.delete(f"/api/invoices/{invoice_id}/").status_code, 403)
		self.api.force_authenticate(self.admin)
		self.assertEqual(self.api.delete(f"/api/invoices/{invoice_id}/").status_code, 204)
		self.assertFalse(Invoice.objects.exists())

	def test_pdf_renders(self):
		company = CompanySettings.load()
		company.bank_name = "State Bank of India"
		company.upi_id = "shreeram@sbi"
		company.save()
		invoice_id = self.api.post("/api/invoices/", {"client": self.client_obj.pk, "bill_month": "2025-03"}, format="json").data["id"]
		res = self.api.get(f"/api/invoices/{invoice_id}/pdf/")
		self.assertEqual(res.status_code, 200)
		self.assertEqual(res["Content-Type"], "application/pdf")
		self.assertTrue(res.content.startswith(b"%PDF"))

	def test_pdf_renders_without_upi(self):
		invoice_id = self.api.post("/api/invoices/", {"client": self.client_obj.pk, "bill_month": "2025-03"}, format="json").data["id"]
		res = self.api.get(f"/api/invoices/{invoice_id}/pdf/")
		self.assertEqual(res.status_code, 200)
		self.assertTrue(res.content.startswith(b"%PDF"))

	def test_upi_payment_link_and_qr(self):
		company = CompanySettings.load()
		company.company_name = "Shreeram Enterprise"
		company.upi_id = "shreeram@sbi"
		uri = upi_payment_uri(company, Decimal("6500"), "1-3-25/26")
		self.assertEqual(
			uri,
			"upi://pay?pa=shreeram@sbi&pn=Shreeram%20Enterprise&am=6500&cu=INR&tn=Invoice%201-3-25/26",
		)
		drawing = upi_qr_drawing(uri, size=80)
		self.assertEqual((drawing.width, drawing.height), (80, 80))

	def test_item_rows_end_with_total_quantity(self):
		items = [
			InvoiceItem(description="GSB", quantity=Decimal("4.000"), rate=Decimal("1000.00"), amount=Decimal("4000.00")),
			InvoiceItem(description="RETI", quantity=Decimal("6.500"), rate=Decimal("1000.04"), amount=Decimal("6500.25")),
		]
		rows, rounded = invoice_item_rows(items)
		self.assertEqual(rounded, Decimal("10500"))
		self.assertEqual(rows[-3][6], "10,500.25")
		self.assertEqual(rows[-2][6], "-0.25")
		self.assertEqual(rows[-1][1], "Total")
		self.assertEqual(rows[-1][3], f"10.500 {settings.MATERIAL_UNIT}")
