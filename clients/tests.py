from datetime import date
from decimal import Decimal
from io import StringIO

from django.core.management import call_command
from django.test import TestCase
from rest_framework.test import APIClient

from accounts.models import User
from core.models import AuditEvent
from orders.models import Order, delete_order_and_rebalance, save_order_and_rebalance
from payments.models import Payment, delete_payment_and_rebalance, save_payment_and_rebalance

from .models import Client


class ClientLedgerTests(TestCase):
	def setUp(self):
		self.client_obj = Client.objects.create(name="Patil Constructions", city="Pune", phone="9822000001", opening_balance=Decimal("1000.00"))

	def _order(self, client=None, weight="10", rate="500", **extra):
		return save_order_and_rebalance(
			Order(client=client or self.client_obj, material="RETI", weight=Decimal(weight), rate=Decimal(rate), **extra)
		)

	def test_current_balance_starts_at_opening_balance(self):
		self.assertEqual(self.client_obj.current_balance, Decimal("1000.00"))

	def test_order_lowers_balance_and_delete_restores_it(self):
		order = self._order()
		self.client_obj.refresh_from_db()
		self.assertEqual(self.client_obj.current_balance, Decimal("-4000.00"))

		delete_order_and_rebalance(order)
		self.client_obj.refresh_from_db()
		self.assertEqual(self.client_obj.current_balance, Decimal("1000.00"))

	def test_editing_order_applies_the_delta(self):
		order = self._order()
		order.weight = Decimal("12")
		save_order_and_rebalance(order)
		self.client_obj.refresh_from_db()
		self.assertEqual(self.client_obj.current_balance, Decimal("1000.00") - Decimal("6000.00"))

	def test_moving_order_recomputes_both_clients(self):
		other = Client.objects.create(name="Jadhav Infra", city="Satara", phone="9822000002")
		order = self._order()
		order.client = other
		save_order_and_rebalance(order, previous_client_id=self.client_obj.pk)

		self.client_obj.refresh_from_db()
		other.refresh_from_db()
		self.assertEqual(self.client_obj.current_balance, Decimal("1000.00"))
		self.assertEqual(other.current_balance, Decimal("-5000.00"))

	def test_payment_raises_balance_and_delete_reverses_it(self):
		payment = save_payment_and_rebalance(Payment(client=self.client_obj, amount=Decimal("750.00")))
		self.client_obj.refresh_from_db()
		self.assertEqual(self.client_obj.current_balance, Decimal("1750.00"))

		delete_payment_and_rebalance(payment)
		self.client_obj.refresh_from_db()
		self.assertEqual(self.client_obj.current_balance, Decimal("1000.00"))

	def test_amount_due_is_the_positive_owed_figure(self):
		self._order()
		save_payment_and_rebalance(Payment(client=self.client_obj, amount=Decimal("2000.00")))
		self.assertEqual(self.client_obj.amount_due(), Decimal("4000.00"))

	def test_statement_orders_entries_by_date_with_running_due(self):
		self._order(order_date=date(2025, 3, 5))
		save_payment_and_rebalance(Payment(client=self.client_obj, amount=Decimal("3000.00"), payment_date=date(2025, 3, 5)))
		self._order(weight="2", order_date=date(2025, 3, 1))

		statement = self.client_obj.statement()
		kinds = [(e["date"], e["type"]) for e in statement["entries"]]
		self.assertEqual(kinds, [(date(2025, 3, 1), "order"), (date(2025, 3, 5), "order"), (date(2025, 3, 5), "payment")])
		self.assertEqual([e["amount_due"] for e in statement["entries"]], [Decimal("2000.00"), Decimal("7000.00"), Decimal("4000.00")])
		self.assertEqual(statement["amount_due"], Decimal("4000.00"))

	def test_recompute_balances_command_repairs_drift(self):
		self._order()
		Client.objects.filter(pk=self.client_obj.pk).update(current_balance=Decimal("123.00"))

		out = StringIO()
		call_command("recompute_balances", "--dry-run", stdout=out)
		self.client_obj.refresh_from_db()
		self.assertEqual(self.client_obj.current_balance, Decimal("123.00"))
		self.assertIn("1 client(s) out of sync", out.getvalue())

		call_command("recompute_balances", stdout=StringIO())
		self.client_obj.refresh_from_db()
		self.assertEqual(self.client_obj.current_balance, Decimal("-4000.00"))


class ClientApiTests(TestCase):
	def setUp(self):
		self.admin = User.objects.create_user(email="admin@example.com", password="pass12345", role=User.Role.ADMIN)
		self.staff = User.objects.create_user(email="staff@example.com", password="pass12345", role=User.Role.STAFF)
		self.api = APIClient()
		self.api.force_authenticate(self.staff)

	def test_create_sets_current_balance_and_ignores_input(self):
		res = self.api.post(
			"/api/clients/",
			{"name": "Shinde Builders", "city": "Pune", "phone": "9822000003", "opening_balance": "2500.00", "current_balance": "99"},
			format="json",
		)
		self.assertEqual(res.status_code, 201)
		self.assertEqual(res.data["current_balance"], Decimal("2500.00"))

	def test_missing_required_fields_use_error_envelope(self):
		res = self.api.post("/api/clients/", {"name": "No City"}, format="json")
		self.assertEqual(res.status_code, 400)
		self.assertIn("error", res.data)
		self.assertIn("city", res.data["details"])

	def test_opening_balance_edit_recomputes_balance(self):
		client = Client.objects.create(name="A", city="Pune", phone="9822000004")
		save_order_and_rebalance(Order(client=client, material="GSB", weight=Decimal("1"), rate=Decimal("100")))
		res = self.api.patch(f"/api/clients/{client.pk}/", {"opening_balance": "500.00"}, format="json")
		self.assertEqual(res.status_code, 200)
		client.refresh_from_db()
		self.assertEqual(client.current_balance, Decimal("400.00"))

	def test_client_with_orders_cannot_be_deleted(self):
		client = Client.objects.create(name="B", city="Pune", phone="9822000005")
		save_order_and_rebalance(Order(client=client, material="GSB", weight=Decimal("1"), rate=Decimal("100")))
		self.api.force_authenticate(self.admin)
		res = self.api.delete(f"/api/clients/{client.pk}/")
		self.assertEqual(res.status_code, 400)
		self.assertTrue(Client.objects.filter(pk=client.pk).exists())

	def test_staff_cannot_delete_clients(self):
		client = Client.objects.create(name="C", city="Pune", phone="9822000006")
		res = self.api.delete(f"/api/clients/{client.pk}/")
		self.assertEqual(res.status_code, 403)
		self.assertEqual(set(res.data), {"error"})

	def test_recompute_balance_action_is_admin_only_and_audited(self):
		client = Client.objects.create(name="D", city="Pune", phone="9822000007")
		Client.objects.filter(pk=client.pk).update(current_balance=Decimal("50.00"))

		self.assertEqual(self.api.post(f"/api/clients/{client.pk}/recompute-balance/").status_code, 403)

		self.api.force_authenticate(self.admin)
		res = self.api.post(f"/api/clients/{client.pk}/recompute-balance/")
		self.assertEqual(res.status_code, 200)
		self.assertEqual(res.data["current_balance"], Decimal("0.00"))
		self.assertEqual(res.data["previous_balance"], Decimal("50.00"))
		self.assertTrue(AuditEvent.objects.filter(action=AuditEvent.Action.BALANCE_RECOMPUTED, client=client).exists())

	def test_search_filters_by_name(self):
		Client.objects.create(name="Kale Traders", city="Daund", phone="9822000008")
		Client.objects.create(name="More Estates", city="Pune", phone="9822000009")
		res = self.api.get("/api/clients/", {"q": "kale"})
		self.assertEqual([row["name"] for row in res.data], ["Kale Traders"])
