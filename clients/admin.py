from django.contrib import admin

from .models import Client


@admin.register(Client)
class ClientAdmin(admin.ModelAdmin):
	list_display = ("id", "name", "city", "phone", "opening_balance", "current_balance")
	list_filter = ("city", "state")
	search_fields = ("name", "city", "phone", "gst_number")
	readonly_fields = ("current_balance", "created_at", "updated_at")

	def save_model(self, request, obj, form, change):
		super().save_model(request, obj, form, change)
		if change and "opening_balance" in form.changed_data:
			Client.recompute_balance(obj.pk)
