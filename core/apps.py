import logging

from django.apps import AppConfig


logger = logging.getLogger(__name__)


def _set_sqlite_pragmas(sender, connection, **kwargs):
    if not connection.settings_dict.get("ENGINE", "").endswith("sqlite3"):
        return
    name = str(connection.settings_dict.get("NAME") or "")
    in_memory = name == ":memory:" or "mode=memory" in name
    try:
        with connection.cursor() as cursor:
            # Ledger writes lock the client row; readers must not block on them.
            if not in_memory:
                cursor.execute("PRAGMA journal_mode=WAL;")
                cursor.execute("PRAGMA synchronous=NORMAL;")
            cursor.execute("PRAGMA busy_timeout=5000;")
    except Exception:
        logger.warning("Could not apply SQLite pragmas to %s", name, exc_info=True)


class CoreConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "core"
    verbose_name = "Company & audit"

    def ready(self):
        from django.db.backends.signals import connection_created

        connection_created.connect(_set_sqlite_pragmas, dispatch_uid="core.sqlite_pragmas")
