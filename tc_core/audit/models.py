# tc_core/audit/models.py
from django.conf import settings
from django.db import models


class AuditEvent(models.Model):
    """
    Append-only trail of state changes: invitations issued, revoked and
    redeemed, companies reviewed, group status and membership changes.
    """
    event_code = models.CharField(max_length=64, db_index=True)  # "<entity>.<verb>", e.g. "invitation.redeemed"
    entity_type = models.CharField(max_length=64)  # model name, e.g. "InvitationCode"
    entity_id = models.BigIntegerField()

    # null for public actions (company self-registration)
    actor_user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        related_name="audit_events",
        null=True,
        blank=True,
    )

    occurred_at = models.DateTimeField(auto_now_add=True, db_index=True)
    metadata = models.JSONField(default=dict, blank=True)

    class Meta:
        db_table = "audit_event"
        ordering = ("-occurred_at", "-id")
        indexes = [
            models.Index(fields=["entity_type", "entity_id"]),
        ]

    def __str__(self) -> str:
        return f"{self.event_code} {self.entity_type}#{self.entity_id}"
