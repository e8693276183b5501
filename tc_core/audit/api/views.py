# tc_core/audit/api/views.py
from __future__ import annotations

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import serializers, viewsets

from tc_core.audit.api.serializers import AuditEventSerializer
from tc_core.audit.models import AuditEvent
from tc_core.audit.selectors import list_audit_events
from tc_core.common.api.pagination import paginate
from tc_core.common.permissions import AuditPermission


class AuditFilterSerializer(serializers.Serializer):
    entityType = serializers.CharField(required=False)
    entityId = serializers.IntegerField(required=False)
    eventCode = serializers.CharField(required=False)
    actorUserId = serializers.IntegerField(required=False)
    since = serializers.DateTimeField(required=False)


class AuditEventViewSet(viewsets.GenericViewSet):
    """
    Audit trail, newest first. Admin only.
    """
    permission_classes = [AuditPermission]
    serializer_class = AuditEventSerializer
    queryset = AuditEvent.objects.none()

    @extend_schema(
        tags=["Audit"],
        responses={200: AuditEventSerializer(many=True)},
        parameters=[
            OpenApiParameter("entityType", OpenApiTypes.STR, description="e.g. InvitationCode, Company, TrainingGroup"),
            OpenApiParameter("entityId", OpenApiTypes.INT),
            OpenApiParameter("eventCode", OpenApiTypes.STR, description="e.g. invitation.redeemed, company.approved"),
            OpenApiParameter("actorUserId", OpenApiTypes.INT),
            OpenApiParameter("since", OpenApiTypes.DATETIME),
        ],
    )
    def list(self, request):
        f = AuditFilterSerializer(data=request.query_params)
        f.is_valid(raise_exception=True)
        params = f.validated_data

        qs = list_audit_events(
            entity_type=params.get("entityType"),
            entity_id=params.get("entityId"),
            event_code=params.get("eventCode"),
            actor_user_id=params.get("actorUserId"),
            since=params.get("since"),
        )
        return paginate(request, qs, AuditEventSerializer)
