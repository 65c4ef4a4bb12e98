import logging

from django.contrib.auth import authenticate, login, logout
from django.db import transaction
from rest_framework import mixins, status, viewsets
from rest_framework.exceptions import ValidationError
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from .models import User
from .permissions import RolePermission
from .serializers import CurrentUserSerializer, LoginSerializer, SetupAdminSerializer, StaffSerializer


logger = logging.getLogger(__name__)


class LoginView(APIView):
    authentication_classes = []
    permission_classes = [AllowAny]

    def post(self, request):
        serializer = LoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        email = serializer.validated_data["email"].strip().lower()
        user = authenticate(request, email=email, password=serializer.validated_data["password"])
        if user is None:
            raise ValidationError("Invalid credentials")
        login(request, user)
        return Response({"user": CurrentUserSerializer(user).data})


class LogoutView(APIView):
    permission_classes = [AllowAny]

    def post(self, request):
        logout(request)
        return Response({"success": True})


class CurrentUserView(APIView):
    permission_classes = [AllowAny]

    def get(self, request):
        user = request.user
        if not user or not user.is_authenticated:
            return Response({"user": None})
        return Response({"user": CurrentUserSerializer(user).data})


class SetupAdminView(APIView):
    """Create the very first admin account. Refuses once any admin exists."""

    authentication_classes = []
    permission_classes = [AllowAny]

    def post(self, request):
        serializer = SetupAdminSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        with transaction.atomic():
            if User.objects.select_for_update().filter(role=User.Role.ADMIN).exists():
                raise ValidationError("Admin already exists. Use the normal login flow.")
            if User.objects.filter(email__iexact=data["email"]).exists():
                raise ValidationError("A user with this email already exists.")
            user = User.objects.create_user(
                email=data["email"],
                password=data["password"],
                full_name=data["full_name"].strip(),
                role=User.Role.ADMIN,
                is_staff=True,
            )

        logger.info("Initial admin account created: %s", user.email)
        return Response(
            {"success": True, "message": "Admin account created successfully", "user": CurrentUserSerializer(user).data},
            status=status.HTTP_201_CREATED,
        )


class StaffViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.CreateModelMixin,
    mixins.UpdateModelMixin,
    mixins.DestroyModelMixin,
    viewsets.GenericViewSet,
):
    queryset = User.objects.filter(role__in=[User.Role.ADMIN, User.Role.STAFF]).order_by("full_name", "email")
    serializer_class = StaffSerializer

    def perform_create(self, serializer):
        user = serializer.save()
        logger.info("Staff account %s created by %s", user.email, self.request.user)

    def perform_destroy(self, instance):
        if instance.pk == self.request.user.pk:
            raise ValidationError("You cannot delete your own account.")
        logger.info("Staff account %s deleted by %s", instance.email, self.request.user)
        instance.delete()

    def get_permissions(self):
        # Staff management is admin-only.
        return [RolePermission(allow_read={User.Role.ADMIN}, allow_write={User.Role.ADMIN})]
