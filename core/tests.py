from datetime import date
from decimal import Decimal

from django.test import SimpleTestCase, TestCase
from rest_framework.test import APIClient

from accounts.models import User

from .filters import month_bounds, parse_month
from .models import AuditEvent, CompanySettings
from .audit import log_event
from .templatetags.formatting import money, number_to_words, rupees_in_words


class FormattingTests(SimpleTestCase):
	def test_money_uses_indian_grouping(self):
		self.assertEqual(money(Decimal("1234567.5")), "12,34,567.50")
		self.assertEqual(money(100000), "1,00,000")
		self.assertEqual(money(-1500), "-1,500")
		self.assertEqual(money(None), "0")

	def test_number_to_words(self):
		self.assertEqual(number_to_words(0), "Zero")
		self.assertEqual(number_to_words(115), "One Hundred Fifteen")
		self.assertEqual(number_to_words(8500), "Eight Thousand Five Hundred")
		self.assertEqual(number_to_words(12_34_567), "Twelve Lakh Thirty Four Thousand Five Hundred Sixty Seven")
		self.assertEqual(number_to_words(2_00_00_000), "Two Crore")

	def test_rupees_in_words_rounds_to_whole_rupees(self):
		self.assertEqual(rupees_in_words(Decimal("999.50")), "One Thousand Rupees Only")


class MonthHelperTests(SimpleTestCase):
	def test_parse_month_accepts_month_or_date(self):
		self.assertEqual(parse_month("2025-03"), date(2025, 3, 1))
		self.assertEqual(parse_month("2025-03-19"), date(2025, 3, 1))
		self.assertEqual(parse_month(date(2025, 3, 19)), date(2025, 3, 1))
		with self.assertRaises(ValueError):
			parse_month("March")

	def test_month_bounds_rolls_over_the_year(self):
		self.assertEqual(month_bounds("2024-12"), (date(2024, 12, 1), date(2025, 1, 1)))


class CompanySettingsApiTests(TestCase):
	def setUp(self):
		self.admin = User.objects.create_user(email="admin@example.com", password="pass12345", role=User.Role.ADMIN)
		self.staff = User.objects.create_user(email="staff@example.com", password="pass12345", role=User.Role.STAFF)
		self.api = APIClient()

	def test_get_creates_defaults(self):
		self.api.force_authenticate(self.staff)
		res = self.api.get("/api/settings/")
		self.assertEqual(res.status_code, 200)
		self.assertEqual(res.data["next_invoice_number"], 1)
		self.assertEqual(CompanySettings.objects.count(), 1)

	def test_patch_merges_fields(self):
		self.api.force_authenticate(self.admin)
		self.api.patch("/api/settings/", {"bank_name": "SBI"}, format="json")
		res = self.api.patch("/api/settings/", {"upi_id": "shreeram@sbi"}, format="json")
		self.assertEqual(res.status_code, 200)
		self.assertEqual(res.data["bank_name"], "SBI")
		self.assertEqual(res.data["upi_id"], "shreeram@sbi")

	def test_counter_must_be_positive(self):
		self.api.force_authenticate(self.admin)
		res = self.api.patch("/api/settings/", {"next_invoice_number": 0}, format="json")
		self.assertEqual(res.status_code, 400)
		self.assertIn("next_invoice_number", res.data["details"])

	def test_staff_cannot_write(self):
		self.api.force_authenticate(self.staff)
		res = self.api.patch("/api/settings/", {"bank_name": "X"}, format="json")
		self.assertEqual(res.status_code, 403)

	def test_singleton_save_reuses_row(self):
		CompanySettings(company_name="A").save()
		CompanySettings(company_name="B").save()
		self.assertEqual(CompanySettings.objects.count(), 1)
		self.assertEqual(CompanySettings.load().company_name, "B")


class AuditTests(TestCase):
	def test_log_event_records_and_ignores_anonymous_actor(self):
		log_event(action=AuditEvent.Action.ORDER_CREATED, actor=None, entity_id=5, summary="x")
		event = AuditEvent.objects.get()
		self.assertIsNone(event.actor)
		self.assertEqual(event.entity_id, 5)
