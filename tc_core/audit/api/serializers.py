from rest_framework import serializers

from tc_core.audit.models import AuditEvent


class AuditEventSerializer(serializers.ModelSerializer):
    eventCode = serializers.CharField(source="event_code", read_only=True)
    entityType = serializers.CharField(source="entity_type", read_only=True)
    entityId = serializers.IntegerField(source="entity_id", read_only=True)
    actorUserId = serializers.IntegerField(source="actor_user_id", read_only=True, allow_null=True)
    actorName = serializers.SerializerMethodField()
    timestamp = serializers.DateTimeField(source="occurred_at", read_only=True)

    class Meta:
        model = AuditEvent
        fields = ["id", "eventCode", "entityType", "entityId", "actorUserId", "actorName", "timestamp", "metadata"]
        read_only_fields = fields

    def get_actorName(self, obj: AuditEvent) -> str | None:
        user = obj.actor_user
        if user is None:
            return None
        return user.get_full_name() or user.get_username()
