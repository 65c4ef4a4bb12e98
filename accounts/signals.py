import logging

from django.contrib.auth.signals import user_logged_in, user_login_failed
from django.dispatch import receiver

from .models import LoginAuditLog


logger = logging.getLogger(__name__)


def get_client_ip(request):
    if request is None:
        return None
    xff = request.META.get("HTTP_X_FORWARDED_FOR")
    if xff:
        return xff.split(",")[0].strip()
    return request.META.get("REMOTE_ADDR")


@receiver(user_logged_in)
def on_user_logged_in(sender, request, user, **kwargs):
    LoginAuditLog.objects.create(
        user=user,
        email=getattr(user, "email", ""),
        ip_address=get_client_ip(request),
        user_agent=request.META.get("HTTP_USER_AGENT", "") if request is not None else "",
        success=True,
    )
    logger.info("User %s logged in", getattr(user, "email", user))


@receiver(user_login_failed)
def on_user_login_failed(sender, credentials, request=None, **kwargs):
    email = (credentials or {}).get("username") or (credentials or {}).get("email") or ""
    LoginAuditLog.objects.create(
        user=None,
        email=str(email)[:254],
        ip_address=get_client_ip(request),
        user_agent=request.META.get("HTTP_USER_AGENT", "") if request is not None else "",
        success=False,
    )
    logger.warning("Failed login for %s", email)
