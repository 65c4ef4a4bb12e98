from django.urls import path
from rest_framework.routers import DefaultRouter

from accounts.api import CurrentUserView, LoginView, LogoutView, SetupAdminView, StaffViewSet
from clients.api import ClientViewSet
from core.api import CompanySettingsView
from invoices.api import InvoiceViewSet
from orders.api import MaterialRateViewSet, OrderViewSet, VehicleViewSet
from payments.api import PaymentViewSet
from reports.api import ReportCsvView, ReportPdfView, ReportView, SummaryView

router = DefaultRouter()

router.register(r"clients", ClientViewSet, basename="client")

router.register(r"orders", OrderViewSet, basename="order")
router.register(r"material-rates", MaterialRateViewSet, basename="materialrate")
router.register(r"vehicles", VehicleViewSet, basename="vehicle")

router.register(r"payments", PaymentViewSet, basename="payment")
router.register(r"invoices", InvoiceViewSet, basename="invoice")

router.register(r"staff", StaffViewSet, basename="staff")

urlpatterns = [
    path("auth/login/", LoginView.as_view(), name="auth-login"),
    path("auth/logout/", LogoutView.as_view(), name="auth-logout"),
    path("auth/user/", CurrentUserView.as_view(), name="auth-user"),
    path("auth/setup-admin/", SetupAdminView.as_view(), name="auth-setup-admin"),
    path("settings/", CompanySettingsView.as_view(), name="company-settings"),
    path("reports/summary/", SummaryView.as_view(), name="report-summary"),
    path("reports/<str:kind>/", ReportView.as_view(), name="report"),
    path("reports/<str:kind>/pdf/", ReportPdfView.as_view(), name="report-pdf"),
    path("reports/<str:kind>/csv/", ReportCsvView.as_view(), name="report-csv"),
]

urlpatterns += router.urls
