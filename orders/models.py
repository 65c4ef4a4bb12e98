from decimal import Decimal, ROUND_HALF_UP

from django.conf import settings
from django.db import models, transaction
from django.utils import timezone


def _local_time():
	return timezone.localtime().time().replace(microsecond=0)


def compute_total(weight, rate) -> Decimal:
	"""Order total: weight x rate, rounded to paise."""
	weight = Decimal(str(weight or 0))
	rate = Decimal(str(rate or 0))
	return (weight * rate).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


class MaterialRate(models.Model):
	material = models.CharField(max_length=60, unique=True)
	rate = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
	updated_at = models.DateTimeField(auto_now=True)

	class Meta:
		ordering = ["material"]

	def __str__(self):
		return f"{self.material} @ {self.rate}"

	def save(self, *args, **kwargs):
		self.material = (self.material or "").strip().upper()
		super().save(*args, **kwargs)

	@classmethod
	def rate_for(cls, material: str):
		"""Current rate for a material, or None when no rate is configured."""
		row = cls.objects.filter(material__iexact=(material or "").strip()).first()
		return row.rate if row else None


class Vehicle(models.Model):
	vehicle_number = models.CharField(max_length=30, unique=True)
	created_at = models.DateTimeField(auto_now_add=True)

	class Meta:
		ordering = ["vehicle_number"]

	def __str__(self):
		return self.vehicle_number


class Order(models.Model):
	class Material(models.TextChoices):
		RETI = "RETI", "Reti"
		KAPCHI = "KAPCHI", "Kapchi"
		GSB = "GSB", "GSB"
		RABAR = "RABAR", "Rabar"

	client = models.ForeignKey("clients.Client", on_delete=models.PROTECT, related_name="orders")
	order_number = models.CharField(max_length=40, blank=True, default="", db_index=True)
	order_date = models.DateField(default=timezone.localdate)
	order_time = models.TimeField(default=_local_time)

	material = models.CharField(max_length=60)
	weight = models.DecimalField(max_digits=12, decimal_places=3)
	quantity = models.DecimalField(max_digits=12, decimal_places=3, null=True, blank=True)
	rate = models.DecimalField(max_digits=12, decimal_places=2)
	total = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))

	location = models.CharField(max_length=255, blank=True, default="")
	truck_number = models.CharField(max_length=30, blank=True, default="")
	delivery_boy_name = models.CharField(max_length=120, blank=True, default="")
	delivery_boy_mobile = models.CharField(max_length=20, blank=True, default="")
	notes = models.TextField(blank=True, default="")

	created_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True)
	created_at = models.DateTimeField(auto_now_add=True)
	updated_at = models.DateTimeField(auto_now=True)

	class Meta:
		ordering = ["-order_date", "-order_time", "-id"]
		indexes = [
			models.Index(fields=["client", "order_date"], name="orders_client_date_idx"),
		]

	def __str__(self):
		return self.order_number or f"Order #{self.pk}"

	@property
	def billed_quantity(self) -> Decimal:
		return self.quantity if self.quantity else self.weight

	def save(self, *args, **kwargs):
		self.material = (self.material or "").strip().upper()
		self.total = compute_total(self.weight, self.rate)
		update_fields = kwargs.get("update_fields")
		if update_fields is not None and ("weight" in update_fields or "rate" in update_fields):
			kwargs["update_fields"] = set(update_fields) | {"total"}
		super().save(*args, **kwargs)

		# Generate a stable order number after PK exists.
		if not self.order_number and self.pk:
			order_number = f"ORD-{self.order_date:%Y%m%d}-{self.pk:06d}"
			Order.objects.filter(pk=self.pk, order_number="").update(order_number=order_number)
			self.order_number = order_number


def save_order_and_rebalance(order: Order, *, previous_client_id=None) -> Order:
	"""Persist an order and recompute the balance of every client it touches.

	Runs as one transaction: if the balance update fails the order write is
	rolled back too.
	"""
	from clients.models import Client

	with transaction.atomic():
		order.save()
		Client.recompute_balance(order.client_id)
		if previous_client_id and previous_client_id != order.client_id:
			Client.recompute_balance(previous_client_id)
	return order


def delete_order_and_rebalance(order: Order) -> None:
	from clients.models import Client

	client_id = order.client_id
	with transaction.atomic():
		order.delete()
		Client.recompute_balance(client_id)
