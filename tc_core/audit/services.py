# tc_core/audit/services.py
from __future__ import annotations

import json
import logging
from typing import Any, Optional

from django.core.serializers.json import DjangoJSONEncoder

from tc_core.audit.models import AuditEvent

logger = logging.getLogger(__name__)


def _json_safe(metadata: Optional[dict[str, Any]]) -> dict[str, Any]:
    # datetimes, decimals and lazy strings end up as plain JSON values
    return json.loads(json.dumps(metadata or {}, cls=DjangoJSONEncoder))


class AuditService:
    """
    Writes audit events inside the caller's transaction: an action that
    rolls back leaves no event behind.
    """

    @staticmethod
    def log(
        *,
        event_code: str,
        entity_type: str,
        entity_id: int,
        actor_user_id: Optional[int],
        metadata: Optional[dict[str, Any]] = None,
    ) -> AuditEvent:
        event = AuditEvent.objects.create(
            event_code=event_code,
            entity_type=entity_type,
            entity_id=entity_id,
            actor_user_id=actor_user_id,
            metadata=_json_safe(metadata),
        )
        logger.debug("audit %s %s#%s by %s", event_code, entity_type, entity_id, actor_user_id)
        return event
