# tc_core/audit/selectors.py
from __future__ import annotations

from datetime import datetime

from django.db.models import QuerySet

from tc_core.audit.models import AuditEvent


def list_audit_events(
    *,
    entity_type: str | None = None,
    entity_id: int | None = None,
    event_code: str | None = None,
    actor_user_id: int | None = None,
    since: datetime | None = None,
) -> QuerySet[AuditEvent]:
    qs = AuditEvent.objects.select_related("actor_user")

    filters = {
        "entity_type": entity_type,
        "entity_id": entity_id,
        "event_code": event_code,
        "actor_user_id": actor_user_id,
        "occurred_at__gte": since,
    }
    qs = qs.filter(**{k: v for k, v in filters.items() if v not in (None, "")})

    return qs.order_by("-occurred_at", "-id")
