from __future__ import annotations

import logging
from typing import Any

from django.db import transaction

from core.models import AuditEvent


logger = logging.getLogger(__name__)


def log_event(
	*,
	action: str,
	actor,
	entity=None,
	client=None,
	entity_id: int | None = None,
	summary: str = "",
	meta: dict[str, Any] | None = None,
) -> None:
	"""Create an AuditEvent safely (never raises to caller).

	`entity_type` is a simple string (not ContentType-based) to keep this lightweight.
	Pass `entity_id` explicitly for entities that were already deleted.
	"""
	try:
		entity_type = ""
		if entity is not None:
			entity_type = entity.__class__.__name__.lower()
			if entity_id is None:
				entity_id = getattr(entity, "pk", None)

		with transaction.atomic():
			AuditEvent.objects.create(
				action=action,
				actor=actor if getattr(actor, "is_authenticated", False) else None,
				client=client,
				entity_type=entity_type,
				entity_id=entity_id,
				summary=summary[:255],
				meta=meta or {},
			)
	except Exception:
		# Audit should never block primary workflow.
		logger.exception("Failed to record audit event %s", action)
