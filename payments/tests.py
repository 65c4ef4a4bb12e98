from datetime import date
from decimal import Decimal
from unittest import mock

from django.test import TestCase
from rest_framework.test import APIClient

from accounts.models import User
from clients.models import Client
from core.models import AuditEvent

from .models import Payment


class PaymentApiTests(TestCase):
	def setUp(self):
		self.staff = User.objects.create_user(email="staff@example.com", password="pass12345", role=User.Role.STAFF)
		self.client_obj = Client.objects.create(name="Patil Constructions", city="Pune", phone="9822000001", opening_balance=Decimal("500.00"))
		self.api = APIClient()
		self.api.force_authenticate(self.staff)

	def _post(self, **data):
		payload = {"client": self.client_obj.pk, "amount": "2000.00", "mode": "UPI", **data}
		return self.api.post("/api/payments/", payload, format="json")

	def test_create_raises_balance_and_numbers_receipt(self):
		res = self._post(payment_date="2025-03-12")
		self.assertEqual(res.status_code, 201)
		self.assertEqual(res.data["receipt_number"], f"RCPT-20250312-{res.data['id']:06d}")
		self.assertEqual(res.data["client_name"], "Patil Constructions")
		self.client_obj.refresh_from_db()
		self.assertEqual(self.client_obj.current_balance, Decimal("2500.00"))
		self.assertTrue(AuditEvent.objects.filter(action=AuditEvent.Action.PAYMENT_RECORDED).exists())

	def test_amount_must_be_positive(self):
		for amount in ("0", "-10"):
			res = self._post(amount=amount)
			self.assertEqual(res.status_code, 400)
			self.assertIn("amount", res.data["details"])
		self.assertFalse(Payment.objects.exists())

	def test_mode_must_be_known(self):
		res = self._post(mode="Cheque")
		self.assertEqual(res.status_code, 400)

	def test_edit_and_delete_keep_balance_in_step(self):
		payment_id = self._post().data["id"]
		self.api.patch(f"/api/payments/{payment_id}/", {"amount": "1500.00"}, format="json")
		self.client_obj.refresh_from_db()
		self.assertEqual(self.client_obj.current_balance, Decimal("2000.00"))

		self.assertEqual(self.api.delete(f"/api/payments/{payment_id}/").status_code, 204)
		self.client_obj.refresh_from_db()
		self.assertEqual(self.client_obj.current_balance, Decimal("500.00"))
		self.assertTrue(AuditEvent.objects.filter(action=AuditEvent.Action.PAYMENT_DELETED, entity_id=payment_id).exists())

	def test_list_filters_by_client_and_month(self):
		other = Client.objects.create(name="Jadhav Infra", city="Satara", phone="9822000002")
		self._post(payment_date="2025-03-01")
		self._post(payment_date="2025-02-28")
		self._post(client=other.pk, payment_date="2025-03-05")
		res = self.api.get("/api/payments/", {"client": self.client_obj.pk, "month": "2025-03"})
		self.assertEqual([row["payment_date"] for row in res.data], ["2025-03-01"])

	def test_before_month_filter_returns_earlier_payments(self):
		self._post(payment_date="2025-03-01")
		self._post(payment_date="2025-02-28")
		res = self.api.get("/api/payments/", {"before_year": 2025, "before_month": 3})
		self.assertEqual([row["payment_date"] for row in res.data], ["2025-02-28"])

	def test_invalid_month_filter_is_a_400(self):
		res = self.api.get("/api/payments/", {"month": "March"})
		self.assertEqual(res.status_code, 400)
		self.assertIn("month", res.data["error"])

	def test_receipt_pdf_renders(self):
		payment = Payment.objects.create(client=self.client_obj, amount=Decimal("1234.50"), payment_date=date(2025, 3, 1))
		res = self.api.get(f"/api/payments/{payment.pk}/receipt/pdf/")
		self.assertEqual(res.status_code, 200)
		self.assertTrue(res.content.startswith(b"%PDF"))

	def test_failed_rebalance_rolls_back_the_payment(self):
		api = APIClient(raise_request_exception=False)
		api.force_authenticate(self.staff)
		with mock.patch.object(Client, "computed_balance", side_effect=RuntimeError("ledger unavailable")):
			with self.assertLogs("core.exceptions", level="ERROR"):
				res = api.post("/api/payments/", {"client": self.client_obj.pk, "amount": "2000.00", "mode": "UPI"}, format="json")
		self.assertEqual(res.status_code, 500)
		self.assertEqual(res.json(), {"error": "Internal server error"})
		self.assertFalse(Payment.objects.exists())
		self.assertFalse(AuditEvent.objects.filter(action=AuditEvent.Action.PAYMENT_RECORDED).exists())
		self.client_obj.refresh_from_db()
		self.assertEqual(self.client_obj.current_balance, Decimal("500.00"))
