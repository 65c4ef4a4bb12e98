from __future__ import annotations

from datetime import timedelta
from decimal import Decimal
import random

from django.contrib.auth import get_user_model
from django.core.management import BaseCommand
from django.db import transaction
from django.utils import timezone


_CITIES = ["Pune", "Satara", "Baramati", "Shirur", "Daund"]
_LOCATIONS = ["Site A", "Ring road", "MIDC plot 14", "Bypass bridge", "Farmhouse lane"]


class Command(BaseCommand):
	help = "Create demo clients, material rates, orders and payments for local testing."

	def add_arguments(self, parser):
		parser.add_argument("--clients", type=int, default=5)
		parser.add_argument("--orders-per-client", type=int, default=6)
		parser.add_argument("--payments-per-client", type=int, default=2)
		parser.add_argument("--days", type=int, default=60, help="Spread orders over this many past days.")
		parser.add_argument("--admin-email", type=str, default="admin@shreeram.local")
		parser.add_argument("--admin-password", type=str, default="Admin12345!")
		parser.add_argument("--seed", type=int, default=None)

	def handle(self, *args, **options):
		from clients.models import Client
		from core.models import CompanySettings
		from orders.models import MaterialRate, Order, Vehicle, save_order_and_rebalance
		from payments.models import Payment, save_payment_and_rebalance

		rng = random.Random(options.get("seed"))
		admin_email = str(options.get("admin_email") or "admin@shreeram.local").strip().lower()
		admin_password = str(options.get("admin_password") or "Admin12345!")
		clients_count = max(1, int(options.get("clients") or 5))
		orders_per_client = max(0, int(options.get("orders_per_client") or 0))
		payments_per_client = max(0, int(options.get("payments_per_client") or 0))
		days = max(1, int(options.get("days") or 60))

		User = get_user_model()
		admin_user, created = User.objects.get_or_create(
			email=admin_email,
			defaults={
				"full_name": "Demo Admin",
				"is_staff": True,
				"is_superuser": True,
				"is_active": True,
				"role": User.Role.ADMIN,
			},
		)
		if created:
			admin_user.set_password(admin_password)
			admin_user.save(update_fields=["password"])
			self.stdout.write(self.style.SUCCESS(f"Created admin user: {admin_email}"))
		else:
			self.stdout.write(f"Using existing admin user: {admin_email}")

		company = CompanySettings.load()
		if not company.address:
			company.address = "Gat No. 12, Pune-Solapur Road\nPune, Maharashtra"
			company.phone = "+91 98220 00000"
			company.bank_name = "State Bank of India"
			company.account_number = "000011112222"
			company.ifsc_code = "SBIN0000001"
			company.upi_id = "shreeram@sbi"
			company.save()

		rates = {"RETI": Decimal("1450.00"), "KAPCHI": Decimal("900.00"), "GSB": Decimal("650.00"), "RABAR": Decimal("550.00")}
		for material, rate in rates.items():
			MaterialRate.objects.get_or_create(material=material, defaults={"rate": rate})
		for number in ("MH12AB1234", "MH42CD5678"):
			Vehicle.objects.get_or_create(vehicle_number=number)

		today = timezone.localdate()
		made_orders = made_payments = 0
		with transaction.atomic():
			for i in range(clients_count):
				client = Client.objects.create(
					name=f"Demo Builder {Client.objects.count() + 1}",
					city=rng.choice(_CITIES),
					phone=f"98{rng.randint(10000000, 99999999)}",
					opening_balance=Decimal(rng.choice([0, 0, 5000, 12500])),
				)
				for _ in range(orders_per_client):
					material = rng.choice(list(rates))
					save_order_and_rebalance(
						Order(
							client=client,
							order_date=today - timedelta(days=rng.randint(0, days)),
							material=material,
							weight=Decimal(rng.randint(50, 400)) / Decimal("10"),
							rate=MaterialRate.rate_for(material),
							location=rng.choice(_LOCATIONS),
							truck_number=rng.choice(["MH12AB1234", "MH42CD5678"]),
							created_by=admin_user,
						)
					)
					made_orders += 1
				for _ in range(payments_per_client):
					save_payment_and_rebalance(
						Payment(
							client=client,
							payment_date=today - timedelta(days=rng.randint(0, days)),
							amount=Decimal(rng.randint(5, 40) * 1000),
							mode=rng.choice(Payment.Mode.values),
							created_by=admin_user,
						)
					)
					made_payments += 1

		self.stdout.write(
			self.style.SUCCESS(f"Seeded {clients_count} clients, {made_orders} orders and {made_payments} payments.")
		)
