import logging

from django.db import transaction
from django.db.models import Q
from django.db.models.deletion import ProtectedError
from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import ValidationError
from rest_framework.response import Response

from accounts.models import User
from accounts.permissions import RolePermission
from core.audit import log_event
from core.models import AuditEvent

from .models import Client
from .serializers import ClientSerializer


logger = logging.getLogger(__name__)


class ClientViewSet(viewsets.ModelViewSet):
    queryset = Client.objects.all()
    serializer_class = ClientSerializer

    def get_queryset(self):
        qs = super().get_queryset()
        q = (self.request.query_params.get("q") or "").strip()
        city = (self.request.query_params.get("city") or "").strip()
        if q:
            qs = qs.filter(Q(name__icontains=q) | Q(phone__icontains=q) | Q(city__icontains=q))
        if city:
            qs = qs.filter(city__iexact=city)
        return qs

    def perform_update(self, serializer):
        with transaction.atomic():
            client = serializer.save()
            # Opening balance edits shift the whole ledger.
            client.current_balance = Client.recompute_balance(client.pk)

    def perform_destroy(self, instance):
        try:
            instance.delete()
        except ProtectedError:
            raise ValidationError("Client has orders, payments or invoices and cannot be deleted.")
        logger.info("Client %s deleted by %s", instance, self.request.user)

    @action(detail=True, methods=["get"])
    def statement(self, request, pk=None):
        client = self.get_object()
        return Response(client.statement())

    @action(detail=True, methods=["post"], url_path="recompute-balance")
    def recompute_balance(self, request, pk=None):
        client = self.get_object()
        previous = client.current_balance
        balance = Client.recompute_balance(client.pk)
        if balance != previous:
            log_event(
                action=AuditEvent.Action.BALANCE_RECOMPUTED,
                actor=request.user,
                entity=client,
                client=client,
                summary=f"Balance corrected for {client.name}",
                meta={"before": str(previous), "after": str(balance)},
            )
        client.refresh_from_db()
        return Response({"previous_balance": previous, **self.get_serializer(client).data})

    def get_permissions(self):
        # Staff manage clients day to day; only admins delete or repair balances.
        admin_only = self.action in {"destroy", "recompute_balance"}
        return [
            RolePermission(
                allow_read={User.Role.ADMIN, User.Role.STAFF},
                allow_write={User.Role.ADMIN} if admin_only else {User.Role.ADMIN, User.Role.STAFF},
                allow_delete={User.Role.ADMIN},
            )
        ]
