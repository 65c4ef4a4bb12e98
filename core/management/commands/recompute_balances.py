from django.core.management import BaseCommand


class Command(BaseCommand):
	help = "Recompute every client's current balance from opening balance, orders and payments."

	def add_arguments(self, parser):
		parser.add_argument("--dry-run", action="store_true", help="Report drift without saving.")
		parser.add_argument("--client", type=int, default=None, help="Only this client id.")

	def handle(self, *args, **options):
		from clients.models import Client

		dry_run = bool(options.get("dry_run"))
		qs = Client.objects.all().order_by("pk")
		if options.get("client"):
			qs = qs.filter(pk=options["client"])

		drifted = 0
		for client in qs:
			expected = client.computed_balance()
			if expected == client.current_balance:
				continue
			drifted += 1
			self.stdout.write(f"{client.pk} {client.name}: stored {client.current_balance}, ledger {expected}")
			if not dry_run:
				Client.recompute_balance(client.pk)

		if dry_run:
			self.stdout.write(self.style.WARNING(f"{drifted} client(s) out of sync (dry run, nothing saved)."))
		else:
			self.stdout.write(self.style.SUCCESS(f"Fixed {drifted} client balance(s)."))
