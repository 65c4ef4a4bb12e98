from django.conf import settings
from django.db import models


class CompanySettings(models.Model):
	"""Singleton row holding branding, bank details and the invoice counter."""

	SINGLETON_PK = 1

	company_name = models.CharField(max_length=255, default="")
	address = models.TextField(blank=True, default="")
	phone = models.CharField(max_length=50, blank=True, default="")
	gst_number = models.CharField(max_length=20, blank=True, default="")

	bank_name = models.CharField(max_length=120, blank=True, default="")
	account_number = models.CharField(max_length=40, blank=True, default="")
	ifsc_code = models.CharField(max_length=20, blank=True, default="")
	upi_id = models.CharField(max_length=120, blank=True, default="")
	logo_url = models.URLField(blank=True, default="")

	invoice_prefix = models.CharField(max_length=20, blank=True, default="")
	next_invoice_number = models.PositiveIntegerField(default=1)

	updated_at = models.DateTimeField(auto_now=True)

	class Meta:
		verbose_name = "company settings"
		verbose_name_plural = "company settings"

	def __str__(self):
		return self.company_name or "Company settings"

	def save(self, *args, **kwargs):
		self.pk = self.SINGLETON_PK
		super().save(*args, **kwargs)

	@classmethod
	def load(cls) -> "CompanySettings":
		obj, _ = cls.objects.get_or_create(
			pk=cls.SINGLETON_PK,
			defaults={"company_name": getattr(settings, "DEFAULT_COMPANY_NAME", "")},
		)
		return obj


class AuditEvent(models.Model):
	"""Lightweight audit trail.

	Stores the *what/who/when* of ledger-affecting actions so balance changes
	can be traced without digging through logs.
	"""

	class Action(models.TextChoices):
		ORDER_CREATED = "order_created", "Order created"
		ORDER_UPDATED = "order_updated", "Order updated"
		ORDER_DELETED = "order_deleted", "Order deleted"
		PAYMENT_RECORDED = "payment_recorded", "Payment recorded"
		PAYMENT_UPDATED = "payment_updated", "Payment updated"
		PAYMENT_DELETED = "payment_deleted", "Payment deleted"
		INVOICE_CREATED = "invoice_created", "Invoice created"
		INVOICE_DELETED = "invoice_deleted", "Invoice deleted"
		BALANCE_RECOMPUTED = "balance_recomputed", "Balance recomputed"

	action = models.CharField(max_length=50, choices=Action.choices)
	actor = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True)
	client = models.ForeignKey("clients.Client", on_delete=models.SET_NULL, null=True, blank=True)
	entity_type = models.CharField(max_length=50)
	entity_id = models.PositiveIntegerField(null=True, blank=True)
	summary = models.CharField(max_length=255, blank=True)
	meta = models.JSONField(blank=True, default=dict)
	created_at = models.DateTimeField(auto_now_add=True)

	class Meta:
		ordering = ["-created_at"]

	def __str__(self):
		return f"{self.action} ({self.entity_type}:{self.entity_id})"
