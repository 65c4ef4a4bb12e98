from django.contrib import admin

from .models import AuditEvent, CompanySettings


@admin.register(CompanySettings)
class CompanySettingsAdmin(admin.ModelAdmin):
	list_display = ("company_name", "gst_number", "invoice_prefix", "next_invoice_number", "updated_at")

	def has_add_permission(self, request):
		return not CompanySettings.objects.exists()


@admin.register(AuditEvent)
class AuditEventAdmin(admin.ModelAdmin):
	list_display = ("created_at", "action", "entity_type", "entity_id", "client", "actor")
	list_filter = ("action", "entity_type")
	search_fields = ("summary",)
	readonly_fields = ("action", "actor", "client", "entity_type", "entity_id", "summary", "meta", "created_at")
