from datetime import date
from decimal import Decimal
from unittest import mock

from django.test import TestCase
from rest_framework.test import APIClient

from accounts.models import User
from clients.models import Client
from core.models import AuditEvent

from .models import MaterialRate, Order, Vehicle, compute_total


class OrderModelTests(TestCase):
	def setUp(self):
		self.client_obj = Client.objects.create(name="Patil Constructions", city="Pune", phone="9822000001")

	def test_total_is_weight_times_rate(self):
		order = Order.objects.create(client=self.client_obj, material="reti", weight=Decimal("12.345"), rate=Decimal("850.00"))
		self.assertEqual(order.total, Decimal("10493.25"))
		self.assertEqual(order.material, "RETI")

	def test_compute_total_rounds_half_up_to_paise(self):
		self.assertEqual(compute_total(Decimal("0.005"), Decimal("1")), Decimal("0.01"))
		self.assertEqual(compute_total(None, Decimal("10")), Decimal("0.00"))

	def test_order_number_is_generated_from_date_and_pk(self):
		order = Order.objects.create(
			client=self.client_obj, material="GSB", weight=Decimal("1"), rate=Decimal("1"), order_date=date(2025, 3, 9)
		)
		self.assertEqual(order.order_number, f"ORD-20250309-{order.pk:06d}")

	def test_quantity_overrides_weight_for_billing(self):
		order = Order(client=self.client_obj, material="GSB", weight=Decimal("5"), quantity=Decimal("3"), rate=Decimal("1"))
		self.assertEqual(order.billed_quantity, Decimal("3"))
		order.quantity = None
		self.assertEqual(order.billed_quantity, Decimal("5"))


class OrderApiTests(TestCase):
	def setUp(self):
		self.admin = User.objects.create_user(email="admin@example.com", password="pass12345", role=User.Role.ADMIN)
		self.staff = User.objects.create_user(email="staff@example.com", password="pass12345", role=User.Role.STAFF)
		self.client_obj = Client.objects.create(name="Patil Constructions", city="Pune", phone="9822000001")
		MaterialRate.objects.create(material="KAPCHI", rate=Decimal("900.00"))
		self.api = APIClient()
		self.api.force_authenticate(self.staff)

	def _post(self, **data):
		payload = {"client": self.client_obj.pk, "material": "KAPCHI", "weight": "10.000", **data}
		return self.api.post("/api/orders/", payload, format="json")

	def test_create_prefills_rate_and_lowers_balance(self):
		res = self._post()
		self.assertEqual(res.status_code, 201)
		self.assertEqual(res.data["rate"], Decimal("900.00"))
		self.assertEqual(res.data["total"], Decimal("9000.00"))
		self.client_obj.refresh_from_db()
		self.assertEqual(self.client_obj.current_balance, Decimal("-9000.00"))
		self.assertTrue(AuditEvent.objects.filter(action=AuditEvent.Action.ORDER_CREATED, client=self.client_obj).exists())

	def test_client_supplied_total_is_ignored(self):
		res = self._post(rate="100.00", total="1.00")
		self.assertEqual(res.status_code, 201)
		self.assertEqual(res.data["total"], Decimal("1000.00"))

	def test_missing_rate_without_configured_rate_is_rejected(self):
		res = self._post(material="RABAR")
		self.assertEqual(res.status_code, 400)
		self.assertIn("rate", res.data["details"])

	def test_non_positive_weight_is_rejected(self):
		res = self._post(weight="0")
		self.assertEqual(res.status_code, 400)
		self.assertTrue(res.data["error"].startswith("weight:"))

	def test_unknown_material_is_rejected(self):
		res = self._post(material="SAND", rate="10")
		self.assertEqual(res.status_code, 400)
		self.assertIn("material", res.data["details"])

	def test_patch_applies_delta_and_delete_restores(self):
		order_id = self._post().data["id"]
		res = self.api.patch(f"/api/orders/{order_id}/", {"weight": "12.000"}, format="json")
		self.assertEqual(res.status_code, 200)
		self.assertEqual(res.data["total"], Decimal("10800.00"))
		self.client_obj.refresh_from_db()
		self.assertEqual(self.client_obj.current_balance, Decimal("-10800.00"))

		self.assertEqual(self.api.delete(f"/api/orders/{order_id}/").status_code, 204)
		self.client_obj.refresh_from_db()
		self.assertEqual(self.client_obj.current_balance, Decimal("0.00"))

	def test_patch_to_other_client_moves_the_charge(self):
		other = Client.objects.create(name="Jadhav Infra", city="Satara", phone="9822000002")
		order_id = self._post().data["id"]
		self.api.patch(f"/api/orders/{order_id}/", {"client": other.pk}, format="json")
		self.client_obj.refresh_from_db()
		other.refresh_from_db()
		self.assertEqual(self.client_obj.current_balance, Decimal("0.00"))
		self.assertEqual(other.current_balance, Decimal("-9000.00"))

	def test_list_filters_by_month_and_material(self):
		self._post(order_date="2025-03-10")
		self._post(order_date="2025-04-02")
		self._post(order_date="2025-03-15", material="RETI", rate="1400")
		res = self.api.get("/api/orders/", {"month": "2025-03", "material": "kapchi"})
		self.assertEqual(len(res.data), 1)
		self.assertEqual(res.data[0]["order_date"], "2025-03-10")

	def test_receipt_pdf_renders(self):
		order_id = self._post(location="Ring road", truck_number="MH12AB1234").data["id"]
		res = self.api.get(f"/api/orders/{order_id}/receipt/pdf/")
		self.assertEqual(res.status_code, 200)
		self.assertEqual(res["Content-Type"], "application/pdf")
		self.assertTrue(res.content.startswith(b"%PDF"))

	def test_failed_rebalance_rolls_back_the_order(self):
		api = APIClient(raise_request_exception=False)
		api.force_authenticate(self.staff)
		with mock.patch.object(Client, "computed_balance", side_effect=RuntimeError("ledger unavailable")):
			with self.assertLogs("core.exceptions", level="ERROR"):
				res = api.post("/api/orders/", {"client": self.client_obj.pk, "material": "KAPCHI", "weight": "10.000"}, format="json")
		self.assertEqual(res.status_code, 500)
		self.assertEqual(res.json(), {"error": "Internal server error"})
		self.assertFalse(Order.objects.exists())
		self.client_obj.refresh_from_db()
		self.assertEqual(self.client_obj.current_balance, Decimal("0.00"))

	def test_unauthenticated_requests_get_401(self):
		res = APIClient().get("/api/orders/")
		self.assertEqual(res.status_code, 401)
		self.assertIn("error", res.data)


class MaterialRateAndVehicleApiTests(TestCase):
	def setUp(self):
		self.admin = User.objects.create_user(email="admin@example.com", password="pass12345", role=User.Role.ADMIN)
		self.staff = User.objects.create_user(email="staff@example.com", password="pass12345", role=User.Role.STAFF)
		self.api = APIClient()
		self.api.force_authenticate(self.admin)

	def test_rates_are_listed_by_material(self):
		MaterialRate.objects.create(material="RETI", rate=Decimal("1"))
		MaterialRate.objects.create(material="GSB", rate=Decimal("1"))
		res = self.api.get("/api/material-rates/")
		self.assertEqual([r["material"] for r in res.data], ["GSB", "RETI"])

	def test_rate_validation(self):
		self.assertEqual(self.api.post("/api/material-rates/", {"material": "", "rate": "10"}, format="json").status_code, 400)
		self.assertEqual(self.api.post("/api/material-rates/", {"material": "reti", "rate": "-1"}, format="json").status_code, 400)
		self.assertEqual(self.api.post("/api/material-rates/", {"material": "reti", "rate": "1450"}, format="json").status_code, 201)
		res = self.api.post("/api/material-rates/", {"material": "Reti", "rate": "1500"}, format="json")
		self.assertEqual(res.status_code, 400)

	def test_staff_can_read_but_not_write_rates(self):
		self.api.force_authenticate(self.staff)
		self.assertEqual(self.api.get("/api/material-rates/").status_code, 200)
		self.assertEqual(self.api.post("/api/material-rates/", {"material": "GSB", "rate": "10"}, format="json").status_code, 403)

	def test_vehicle_numbers_are_trimmed_and_unique(self):
		res = self.api.post("/api/vehicles/", {"vehicle_number": "  mh12  ab 1234 "}, format="json")
		self.assertEqual(res.status_code, 201)
		self.assertEqual(res.data["vehicle_number"], "MH12 AB 1234")
		self.assertEqual(self.api.post("/api/vehicles/", {"vehicle_number": "MH12 AB 1234"}, format="json").status_code, 400)
		self.assertEqual(self.api.post("/api/vehicles/", {"vehicle_number": "   "}, format="json").status_code, 400)
		self.assertEqual(Vehicle.objects.count(), 1)
