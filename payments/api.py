import logging

from rest_framework import viewsets
from rest_framework.decorators import action

from accounts.models import User
from accounts.permissions import RolePermission
from core.audit import log_event
from core.filters import filter_by_period, get_str
from core.models import AuditEvent
from core.pdf import payment_receipt_pdf_bytes, pdf_bytes_response

from .models import Payment, delete_payment_and_rebalance
from .serializers import PaymentSerializer


logger = logging.getLogger(__name__)


class PaymentViewSet(viewsets.ModelViewSet):
    queryset = Payment.objects.select_related("client").all()
    serializer_class = PaymentSerializer

    def get_queryset(self):
        qs = super().get_queryset()
        if self.action != "list":
            return qs
        qs = filter_by_period(self.request, qs, "payment_date")
        mode = get_str(self.request, "mode")
        if mode:
            qs = qs.filter(mode__iexact=mode)
        return qs

    def perform_create(self, serializer):
        payment = serializer.save(created_by=self.request.user)
        payment.client.refresh_from_db(fields=["current_balance"])
        log_event(
            action=AuditEvent.Action.PAYMENT_RECORDED,
            actor=self.request.user,
            entity=payment,
            client=payment.client,
            summary=f"{payment.receipt_number}: {payment.amount} via {payment.mode}",
            meta={"amount": str(payment.amount), "balance_after": str(payment.client.current_balance)},
        )
        logger.info("Payment %s recorded for client %s (%s)", payment.receipt_number, payment.client_id, payment.amount)

    def perform_update(self, serializer):
        previous_amount = serializer.instance.amount
        payment = serializer.save()
        log_event(
            action=AuditEvent.Action.PAYMENT_UPDATED,
            actor=self.request.user,
            entity=payment,
            client=payment.client,
            summary=f"{payment.receipt_number}: amount {previous_amount} -> {payment.amount}",
            meta={"previous_amount": str(previous_amount), "amount": str(payment.amount)},
        )

    def perform_destroy(self, instance):
        payment_id = instance.pk
        client = instance.client
        amount = instance.amount
        delete_payment_and_rebalance(instance)
        log_event(
            action=AuditEvent.Action.PAYMENT_DELETED,
            actor=self.request.user,
            entity=instance,
            entity_id=payment_id,
            client=client,
            summary=f"Payment {instance.receipt_number} removed ({amount})",
            meta={"amount": str(amount)},
        )
        logger.info("Payment %s deleted by %s", payment_id, self.request.user)

    @action(detail=True, methods=["get"], url_path="receipt/pdf")
    def receipt_pdf(self, request, pk=None):
        payment = self.get_object()
        filename = f"receipt-{payment.receipt_number or payment.pk}.pdf"
        return pdf_bytes_response(payment_receipt_pdf_bytes(payment), filename, inline=True)

    def get_permissions(self):
        return [
            RolePermission(
                allow_read={User.Role.ADMIN, User.Role.STAFF},
                allow_write={User.Role.ADMIN, User.Role.STAFF},
            )
        ]
