from django.test import TestCase
from rest_framework.test import APIClient

from .models import LoginAuditLog, User


class AuthApiTests(TestCase):
	def setUp(self):
		self.api = APIClient()
		self.user = User.objects.create_user(
			email="staff@example.com", password="pass12345", full_name="Ravi Pawar", role=User.Role.STAFF
		)

	def test_login_logout_and_current_user(self):
		self.assertEqual(self.api.get("/api/auth/user/").data, {"user": None})

		res = self.api.post("/api/auth/login/", {"email": "Staff@Example.com", "password": "pass12345"}, format="json")
		self.assertEqual(res.status_code, 200)
		self.assertEqual(res.data["user"]["name"], "Ravi Pawar")
		self.assertTrue(LoginAuditLog.objects.filter(user=self.user, success=True).exists())

		me = self.api.get("/api/auth/user/").data["user"]
		self.assertEqual(me, {"id": self.user.pk, "name": "Ravi Pawar", "email": "staff@example.com", "role": "staff"})

		self.assertEqual(self.api.post("/api/auth/logout/").status_code, 200)
		self.assertEqual(self.api.get("/api/auth/user/").data, {"user": None})

	def test_bad_credentials_are_a_400_and_audited(self):
		res = self.api.post("/api/auth/login/", {"email": "staff@example.com", "password": "wrong"}, format="json")
		self.assertEqual(res.status_code, 400)
		self.assertEqual(res.data, {"error": "Invalid credentials"})
		self.assertTrue(LoginAuditLog.objects.filter(email="staff@example.com", success=False).exists())

	def test_display_name_falls_back_to_email(self):
		user = User.objects.create_user(email="noname@example.com", password="x")
		self.assertEqual(user.display_name, "noname")


class SetupAdminTests(TestCase):
	def setUp(self):
		self.api = APIClient()

	def test_creates_first_admin_once(self):
		payload = {"email": "owner@example.com", "password": "secret1", "full_name": "Owner"}
		res = self.api.post("/api/auth/setup-admin/", payload, format="json")
		self.assertEqual(res.status_code, 201)
		self.assertTrue(res.data["success"])
		admin = User.objects.get(email="owner@example.com")
		self.assertEqual(admin.role, User.Role.ADMIN)
		self.assertTrue(admin.check_password("secret1"))

		again = self.api.post("/api/auth/setup-admin/", {**payload, "email": "other@example.com"}, format="json")
		self.assertEqual(again.status_code, 400)
		self.assertIn("Admin already exists", again.data["error"])

	def test_missing_fields(self):
		res = self.api.post("/api/auth/setup-admin/", {"email": "owner@example.com"}, format="json")
		self.assertEqual(res.status_code, 400)
		self.assertIn("password", res.data["details"])
		self.assertFalse(User.objects.exists())


class StaffApiTests(TestCase):
	def setUp(self):
		self.admin = User.objects.create_user(email="admin@example.com", password="pass12345", full_name="Asha Admin", role=User.Role.ADMIN)
		self.staff = User.objects.create_user(email="staff@example.com", password="pass12345", full_name="Ravi Pawar", role=User.Role.STAFF)
		self.api = APIClient()
		self.api.force_authenticate(self.admin)

	def test_list_sorted_by_name(self):
		res = self.api.get("/api/staff/")
		self.assertEqual([row["full_name"] for row in res.data], ["Asha Admin", "Ravi Pawar"])
		self.assertNotIn("password", res.data[0])

	def test_create_generates_password_when_omitted(self):
		res = self.api.post("/api/staff/", {"email": "New@Example.com", "full_name": "New Hire"}, format="json")
		self.assertEqual(res.status_code, 201)
		user = User.objects.get(email="new@example.com")
		self.assertEqual(user.role, User.Role.STAFF)
		self.assertTrue(user.has_usable_password())

	def test_duplicate_email_rejected(self):
		res = self.api.post("/api/staff/", {"email": "staff@example.com", "full_name": "Dup"}, format="json")
		self.assertEqual(res.status_code, 400)

	def test_staff_cannot_manage_staff(self):
		self.api.force_authenticate(self.staff)
		self.assertEqual(self.api.get("/api/staff/").status_code, 403)

	def test_admin_cannot_delete_self(self):
		self.assertEqual(self.api.delete(f"/api/staff/{self.admin.pk}/").status_code, 400)
		self.assertEqual(self.api.delete(f"/api/staff/{self.staff.pk}/").status_code, 204)
