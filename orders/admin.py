from django.contrib import admin

from .models import MaterialRate, Order, Vehicle, delete_order_and_rebalance, save_order_and_rebalance


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
	list_display = ("order_number", "order_date", "client", "material", "weight", "rate", "total", "truck_number")
	list_filter = ("material", "order_date")
	search_fields = ("order_number", "client__name", "truck_number", "delivery_boy_name")
	readonly_fields = ("order_number", "total", "created_by", "created_at", "updated_at")

	def save_model(self, request, obj, form, change):
		previous_client_id = None
		if change:
			previous_client_id = Order.objects.filter(pk=obj.pk).values_list("client_id", flat=True).first()
		elif not obj.created_by_id:
			obj.created_by = request.user
		save_order_and_rebalance(obj, previous_client_id=previous_client_id)

	def delete_model(self, request, obj):
		delete_order_and_rebalance(obj)

	def delete_queryset(self, request, queryset):
		for obj in queryset:
			delete_order_and_rebalance(obj)


@admin.register(MaterialRate)
class MaterialRateAdmin(admin.ModelAdmin):
	list_display = ("material", "rate", "updated_at")
	search_fields = ("material",)


@admin.register(Vehicle)
class VehicleAdmin(admin.ModelAdmin):
	list_display = ("vehicle_number", "created_at")
	search_fields = ("vehicle_number",)
