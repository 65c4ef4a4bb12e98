from django.contrib.auth.models import AbstractBaseUser, BaseUserManager, PermissionsMixin
from django.db import models
from django.utils import timezone


class UserManager(BaseUserManager):
	def create_user(self, email, password=None, **extra_fields):
		if not email:
			raise ValueError("Email is required")
		email = self.normalize_email(email).lower()
		user = self.model(email=email, **extra_fields)
		user.set_password(password)
		user.save(using=self._db)
		return user

	def create_superuser(self, email, password=None, **extra_fields):
		extra_fields.setdefault("is_staff", True)
		extra_fields.setdefault("is_superuser", True)
		extra_fields.setdefault("is_active", True)
		extra_fields.setdefault("role", User.Role.ADMIN)
		if extra_fields.get("is_staff") is not True:
			raise ValueError("Superuser must have is_staff=True")
		if extra_fields.get("is_superuser") is not True:
			raise ValueError("Superuser must have is_superuser=True")
		return self.create_user(email, password, **extra_fields)


class User(AbstractBaseUser, PermissionsMixin):
	"""Portal user: identity, role and display profile in one row."""

	class Role(models.TextChoices):
		ADMIN = "admin", "Admin"
		STAFF = "staff", "Staff"

	email = models.EmailField(unique=True)
	full_name = models.CharField(max_length=255, blank=True)
	phone = models.CharField(max_length=50, blank=True)

	role = models.CharField(max_length=20, choices=Role.choices, default=Role.STAFF)

	is_active = models.BooleanField(default=True)
	is_staff = models.BooleanField(default=False)
	date_joined = models.DateTimeField(default=timezone.now)

	objects = UserManager()

	USERNAME_FIELD = "email"
	REQUIRED_FIELDS = []

	class Meta:
		ordering = ["full_name", "email"]

	def __str__(self):
		return self.email

	@property
	def display_name(self) -> str:
		return (self.full_name or "").strip() or self.email.split("@")[0] or "User"

	@property
	def is_admin(self) -> bool:
		return self.is_superuser or self.role == self.Role.ADMIN


class LoginAuditLog(models.Model):
	user = models.ForeignKey("accounts.User", on_delete=models.SET_NULL, null=True, blank=True)
	email = models.EmailField(blank=True)
	ip_address = models.GenericIPAddressField(null=True, blank=True)
	user_agent = models.TextField(blank=True)

	success = models.BooleanField(default=False)
	created_at = models.DateTimeField(auto_now_add=True)

	class Meta:
		ordering = ["-created_at"]

	def __str__(self):
		return f"{self.email} @ {self.created_at:%Y-%m-%d %H:%M:%S} ({'ok' if self.success else 'fail'})"
