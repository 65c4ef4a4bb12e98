import csv

from django.http import Http404, HttpResponse
from django.utils import timezone
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.models import User
from accounts.permissions import RolePermission
from clients.models import Client
from core.filters import get_int, get_month, get_str
from core.pdf import pdf_response
from orders.models import Order
from payments.models import Payment

from . import summaries


REPORT_KINDS = {
    "material-wise": "Material-wise report",
    "client-wise": "Client-wise report",
    "pending": "Pending payments report",
}


class ReportBaseView(APIView):
    def get_permissions(self):
        return [RolePermission(allow_read={User.Role.ADMIN, User.Role.STAFF})]

    def filters(self, request) -> dict:
        return {
            "month": get_month(request, "month"),
            "client_id": get_int(request, "client"),
            "material": get_str(request, "material") or None,
        }

    def fetch(self):
        clients = list(Client.objects.all())
        orders = list(Order.objects.all())
        payments = list(Payment.objects.all())
        return clients, orders, payments

    def build(self, kind: str, request):
        if kind not in REPORT_KINDS:
            raise Http404
        f = self.filters(request)
        clients, orders, payments = self.fetch()
        if kind == "material-wise":
            return summaries.material_wise(
                summaries.filter_orders(orders, month=f["month"], client_id=f["client_id"], material=f["material"])
            )
        if kind == "client-wise":
            return summaries.client_wise(
                clients,
                summaries.filter_orders(orders, month=f["month"], material=f["material"]),
                summaries.filter_payments(payments, month=f["month"]),
                client_id=f["client_id"],
            )
        return summaries.pending_payments(clients, orders, payments, client_id=f["client_id"], month=f["month"])

    def table(self, kind: str, data) -> tuple[list[str], list[list]]:
        """Flatten report data into a header row and body rows for exports."""
        if kind == "material-wise":
            header = ["Material", "Orders", "Weight (MT)", "Amount", "Average rate"]
            rows = [
                [r["material"], r["order_count"], r["total_weight"], r["total_amount"], r["average_rate"]]
                for r in data["rows"]
            ]
            if rows:
                t = data["totals"]
                rows.append(["Total", t["order_count"], t["total_weight"], t["total_amount"], ""])
            return header, rows
        if kind == "client-wise":
            header = ["Client", "City", "Orders", "Weight (MT)", "Total orders", "Payments", "Pending balance"]
            rows = [
                [
                    r["client_name"],
                    r["city"],
                    r["order_count"],
                    r["total_weight"],
                    r["total_orders"],
                    r["total_payments"],
                    r["pending_balance"],
                ]
                for r in data
            ]
            return header, rows
        header = ["Client", "City", "Month", "Total orders", "Payments", "Pending balance"]
        rows = [
            [r["client_name"], r["city"], r["month"], r["total_orders"], r["total_payments"], r["pending_balance"]]
            for r in data
        ]
        return header, rows

    def filename(self, kind: str, request, ext: str) -> str:
        month = get_month(request, "month")
        suffix = f"{month:%Y-%m}" if month else timezone.localdate().isoformat()
        return f"{kind}-report-{suffix}.{ext}"


class SummaryView(ReportBaseView):
    """Dashboard figures over all clients, orders and payments."""

    def get(self, request):
        clients, orders, payments = self.fetch()
        return Response(summaries.dashboard_summary(clients, orders, payments, today=timezone.localdate()))


class ReportView(ReportBaseView):
    def get(self, request, kind):
        data = self.build(kind, request)
        if isinstance(data, list):
            return Response({"kind": kind, "rows": data})
        return Response({"kind": kind, **data})


class ReportPdfView(ReportBaseView):
    def get(self, request, kind):
        data = self.build(kind, request)
        header, rows = self.table(kind, data)
        return pdf_response(REPORT_KINDS[kind], header, rows, self.filename(kind, request, "pdf"))


class ReportCsvView(ReportBaseView):
    def get(self, request, kind):
        data = self.build(kind, request)
        header, rows = self.table(kind, data)

        response = HttpResponse(content_type="text/csv")
        response["Content-Disposition"] = f'attachment; filename="{self.filename(kind, request, "csv")}"'
        writer = csv.writer(response)
        writer.writerow(header)
        for row in rows:
            writer.writerow(row)
        return response
