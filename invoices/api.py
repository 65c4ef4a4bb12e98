import logging

from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import ValidationError
from rest_framework.response import Response

from accounts.models import User
from accounts.permissions import RolePermission
from clients.models import Client
from core.audit import log_event
from core.filters import get_int, get_month, get_str
from core.models import AuditEvent
from core.pdf import invoice_pdf_bytes, pdf_bytes_response

from .billing import build_invoice_preview, generate_invoice
from .models import Invoice
from .serializers import InvoiceCreateSerializer, InvoicePreviewSerializer, InvoiceSerializer


logger = logging.getLogger(__name__)


class InvoiceViewSet(viewsets.ModelViewSet):
    queryset = Invoice.objects.select_related("client").prefetch_related("items").all()
    serializer_class = InvoiceSerializer
    http_method_names = ["get", "post", "patch", "delete", "head", "options"]

    def get_queryset(self):
        qs = super().get_queryset()
        if self.action != "list":
            return qs
        client_id = get_int(self.request, "client")
        if client_id is not None:
            qs = qs.filter(client_id=client_id)
        month = get_month(self.request, "month")
        if month is not None:
            qs = qs.filter(bill_month=month)
        q = get_str(self.request, "q")
        if q:
            qs = qs.filter(invoice_number__icontains=q)
        return qs

    def create(self, request, *args, **kwargs):
        params = InvoiceCreateSerializer(data=request.data)
        params.is_valid(raise_exception=True)
        client = params.validated_data["client"]
        invoice = generate_invoice(
            client,
            params.validated_data["bill_month"],
            created_by=request.user,
            notes=params.validated_data.get("notes", ""),
        )
        log_event(
            action=AuditEvent.Action.INVOICE_CREATED,
            actor=request.user,
            entity=invoice,
            client=client,
            summary=f"{invoice.invoice_number} for {invoice.bill_month:%Y-%m}",
            meta={"total_payable": str(invoice.total_payable)},
        )
        data = InvoiceSerializer(invoice, context=self.get_serializer_context()).data
        return Response(data, status=status.HTTP_201_CREATED)

    def perform_destroy(self, instance):
        invoice_id = instance.pk
        number = instance.invoice_number
        client = instance.client
        instance.delete()
        log_event(
            action=AuditEvent.Action.INVOICE_DELETED,
            actor=self.request.user,
            entity=instance,
            entity_id=invoice_id,
            client=client,
            summary=f"Invoice {number} deleted",
        )
        logger.info("Invoice %s deleted by %s", number, self.request.user)

    @action(detail=False, methods=["get"])
    def preview(self, request):
        client_id = get_int(request, "client")
        month = get_month(request, "month")
        if client_id is None or month is None:
            raise ValidationError("client and month are required.")
        try:
            client = Client.objects.get(pk=client_id)
        except Client.DoesNotExist:
            raise ValidationError({"client": "Unknown client."})
        return Response(InvoicePreviewSerializer(build_invoice_preview(client, month)).data)

    @action(detail=True, methods=["get"])
    def pdf(self, request, pk=None):
        invoice = self.get_object()
        filename = f"invoice-{invoice.invoice_number.replace('/', '-')}.pdf"
        return pdf_bytes_response(invoice_pdf_bytes(invoice), filename, inline=True)

    def get_permissions(self):
        return [
            RolePermission(
                allow_read={User.Role.ADMIN, User.Role.STAFF},
                allow_write={User.Role.ADMIN, User.Role.STAFF},
                allow_delete={User.Role.ADMIN},
            )
        ]
