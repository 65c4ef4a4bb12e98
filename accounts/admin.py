from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as DjangoUserAdmin

from .models import LoginAuditLog, User


@admin.register(User)
class UserAdmin(DjangoUserAdmin):
	ordering = ("email",)
	list_display = ("email", "full_name", "role", "is_active", "is_staff")
	list_filter = ("role", "is_active", "is_staff")
	search_fields = ("email", "full_name", "phone")
	fieldsets = (
		(None, {"fields": ("email", "password")}),
		("Profile", {"fields": ("full_name", "phone", "role")}),
		("Permissions", {"fields": ("is_active", "is_staff", "is_superuser", "groups", "user_permissions")}),
		("Dates", {"fields": ("last_login", "date_joined")}),
	)
	add_fieldsets = (
		(None, {"classes": ("wide",), "fields": ("email", "full_name", "role", "password1", "password2")}),
	)


@admin.register(LoginAuditLog)
class LoginAuditLogAdmin(admin.ModelAdmin):
	list_display = ("created_at", "email", "success", "ip_address")
	list_filter = ("success",)
	search_fields = ("email", "ip_address")
	readonly_fields = ("user", "email", "ip_address", "user_agent", "success", "created_at")
