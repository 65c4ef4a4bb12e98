"""
URL configuration for the Shreeram Enterprise backend.

The JSON API lives under /api/; the Django admin under /admin/.
"""
from django.contrib import admin
from django.urls import include, path

admin.site.site_header = "Shreeram Enterprise"
admin.site.site_title = "Shreeram Enterprise"
admin.site.index_title = "Back office"

urlpatterns = [
    path("admin/", admin.site.urls),
    path("api/", include("shreeram.api_urls")),
]
