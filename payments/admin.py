from django.contrib import admin

from .models import Payment, delete_payment_and_rebalance, save_payment_and_rebalance


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
	list_display = ("receipt_number", "payment_date", "client", "amount", "mode")
	list_filter = ("mode", "payment_date")
	search_fields = ("receipt_number", "client__name", "notes")
	readonly_fields = ("receipt_number", "created_by", "created_at")

	def save_model(self, request, obj, form, change):
		previous_client_id = None
		if change:
			previous_client_id = Payment.objects.filter(pk=obj.pk).values_list("client_id", flat=True).first()
		elif not obj.created_by_id:
			obj.created_by = request.user
		save_payment_and_rebalance(obj, previous_client_id=previous_client_id)

	def delete_model(self, request, obj):
		delete_payment_and_rebalance(obj)

	def delete_queryset(self, request, queryset):
		for obj in queryset:
			delete_payment_and_rebalance(obj)
