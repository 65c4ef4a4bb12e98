import logging

from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.models import User
from accounts.permissions import RolePermission

from .models import CompanySettings
from .serializers import CompanySettingsSerializer


logger = logging.getLogger(__name__)


class CompanySettingsView(APIView):
    """Singleton company settings: GET returns it, PATCH merges fields into it."""

    def get_permissions(self):
        return [
            RolePermission(
                allow_read={User.Role.ADMIN, User.Role.STAFF},
                allow_write={User.Role.ADMIN},
            )
        ]

    def get(self, request):
        return Response(CompanySettingsSerializer(CompanySettings.load()).data)

    def patch(self, request):
        serializer = CompanySettingsSerializer(CompanySettings.load(), data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        logger.info("Company settings updated by %s: %s", request.user, sorted(serializer.validated_data))
        return Response(serializer.data)
