import logging

from rest_framework import mixins, viewsets
from rest_framework.decorators import action

from accounts.models import User
from accounts.permissions import RolePermission
from core.audit import log_event
from core.filters import filter_by_period, get_str
from core.models import AuditEvent
from core.pdf import order_receipt_pdf_bytes, pdf_bytes_response

from .models import MaterialRate, Order, Vehicle, delete_order_and_rebalance
from .serializers import MaterialRateSerializer, OrderSerializer, VehicleSerializer


logger = logging.getLogger(__name__)


class OrderViewSet(viewsets.ModelViewSet):
    queryset = Order.objects.select_related("client").all()
    serializer_class = OrderSerializer

    def get_queryset(self):
        qs = super().get_queryset()
        if self.action != "list":
            return qs
        qs = filter_by_period(self.request, qs, "order_date")
        material = get_str(self.request, "material")
        if material:
            qs = qs.filter(material__iexact=material)
        return qs

    def perform_create(self, serializer):
        order = serializer.save(created_by=self.request.user)
        order.client.refresh_from_db(fields=["current_balance"])
        log_event(
            action=AuditEvent.Action.ORDER_CREATED,
            actor=self.request.user,
            entity=order,
            client=order.client,
            summary=f"{order.order_number}: {order.material} {order.weight} MT = {order.total}",
            meta={"total": str(order.total), "balance_after": str(order.client.current_balance)},
        )
        logger.info("Order %s created for client %s (total %s)", order.order_number, order.client_id, order.total)

    def perform_update(self, serializer):
        previous_total = serializer.instance.total
        order = serializer.save()
        order.client.refresh_from_db(fields=["current_balance"])
        log_event(
            action=AuditEvent.Action.ORDER_UPDATED,
            actor=self.request.user,
            entity=order,
            client=order.client,
            summary=f"{order.order_number}: total {previous_total} -> {order.total}",
            meta={"previous_total": str(previous_total), "total": str(order.total)},
        )

    def perform_destroy(self, instance):
        order_id = instance.pk
        client = instance.client
        total = instance.total
        delete_order_and_rebalance(instance)
        log_event(
            action=AuditEvent.Action.ORDER_DELETED,
            actor=self.request.user,
            entity=instance,
            entity_id=order_id,
            client=client,
            summary=f"Order {instance.order_number} removed ({total})",
            meta={"total": str(total)},
        )
        logger.info("Order %s deleted by %s", order_id, self.request.user)

    @action(detail=True, methods=["get"], url_path="receipt/pdf")
    def receipt_pdf(self, request, pk=None):
        order = self.get_object()
        filename = f"delivery-{order.order_number or order.pk}.pdf"
        return pdf_bytes_response(order_receipt_pdf_bytes(order), filename, inline=True)

    def get_permissions(self):
        return [
            RolePermission(
                allow_read={User.Role.ADMIN, User.Role.STAFF},
                allow_write={User.Role.ADMIN, User.Role.STAFF},
            )
        ]


class MaterialRateViewSet(viewsets.ModelViewSet):
    queryset = MaterialRate.objects.all()
    serializer_class = MaterialRateSerializer

    def perform_update(self, serializer):
        rate = serializer.save()
        # Existing orders keep the rate they were entered with.
        logger.info("Material rate %s set to %s by %s", rate.material, rate.rate, self.request.user)

    def get_permissions(self):
        return [
            RolePermission(
                allow_read={User.Role.ADMIN, User.Role.STAFF},
                allow_write={User.Role.ADMIN},
            )
        ]


class VehicleViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.CreateModelMixin,
    mixins.DestroyModelMixin,
    viewsets.GenericViewSet,
):
    queryset = Vehicle.objects.all()
    serializer_class = VehicleSerializer

    def get_permissions(self):
        return [
            RolePermission(
                allow_read={User.Role.ADMIN, User.Role.STAFF},
                allow_write={User.Role.ADMIN, User.Role.STAFF},
                allow_delete={User.Role.ADMIN},
            )
        ]
