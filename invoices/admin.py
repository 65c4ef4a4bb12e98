from django.contrib import admin

from .models import Invoice, InvoiceItem


class InvoiceItemInline(admin.TabularInline):
	model = InvoiceItem
	extra = 0
	raw_id_fields = ("order",)


@admin.register(Invoice)
class InvoiceAdmin(admin.ModelAdmin):
	list_display = ("invoice_number", "client", "bill_month", "orders_total", "previous_balance", "paid_amount", "total_payable")
	list_filter = ("bill_month",)
	search_fields = ("invoice_number", "client__name")
	readonly_fields = ("orders_total", "total_payable", "remaining_balance", "created_by", "created_at", "updated_at")
	inlines = [InvoiceItemInline]

	def save_related(self, request, form, formsets, change):
		super().save_related(request, form, formsets, change)
		form.instance.recalculate_totals()
