# tc_core/groups/api/serializers.py
from __future__ import annotations

from rest_framework import serializers

from tc_core.groups.capacity import count_participants
from tc_core.groups.models import GroupMembership, GroupStatus, TrainingGroup


class GroupSerializer(serializers.ModelSerializer):
    companyId = serializers.IntegerField(source="company_id", read_only=True, allow_null=True)
    companyName = serializers.SerializerMethodField()
    courseId = serializers.IntegerField(source="course_id", read_only=True, allow_null=True)
    courseName = serializers.SerializerMethodField()
    maxParticipants = serializers.IntegerField(source="max_participants", read_only=True)
    currentParticipants = serializers.SerializerMethodField()
    hasCapacity = serializers.SerializerMethodField()
    registrationDeadline = serializers.DateTimeField(source="registration_deadline", read_only=True, allow_null=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = TrainingGroup
        fields = [
            "id",
            "name",
            "description",
            "companyId",
            "companyName",
            "courseId",
            "courseName",
            "maxParticipants",
            "currentParticipants",
            "hasCapacity",
            "status",
            "registrationDeadline",
            "createdAt",
            "updatedAt",
        ]
        read_only_fields = fields

    def get_companyName(self, obj: TrainingGroup) -> str | None:
        return obj.company.company_name if obj.company_id else None

    def get_courseName(self, obj: TrainingGroup) -> str | None:
        return obj.course.course_name if obj.course_id else None

    def get_currentParticipants(self, obj: TrainingGroup) -> int:
        # annotated by group_qs(); falls back to a live count for bare instances
        count = getattr(obj, "participant_count", None)
        return count if count is not None else count_participants(obj.id)

    def get_hasCapacity(self, obj: TrainingGroup) -> bool:
        return self.get_currentParticipants(obj) < obj.max_participants


class GroupCreateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    description = serializers.CharField(required=False, allow_blank=True, default="")
    companyId = serializers.IntegerField(required=False, allow_null=True)
    courseId = serializers.IntegerField(required=False, allow_null=True)
    maxParticipants = serializers.IntegerField(min_value=1, required=False)
    status = serializers.ChoiceField(
        choices=[GroupStatus.DRAFT, GroupStatus.ACTIVE],
        required=False,
        default=GroupStatus.DRAFT,
    )
    registrationDeadline = serializers.DateTimeField(required=False, allow_null=True)


class GroupUpdateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255, required=False)
    description = serializers.CharField(required=False, allow_blank=True)
    courseId = serializers.IntegerField(required=False)
    maxParticipants = serializers.IntegerField(min_value=1, required=False)
    registrationDeadline = serializers.DateTimeField(required=False, allow_null=True)


class GroupStatusUpdateSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=GroupStatus.choices)


class GroupAddUsersSerializer(serializers.Serializer):
    userIds = serializers.ListField(child=serializers.IntegerField(min_value=1), allow_empty=False)


class GroupMemberSerializer(serializers.ModelSerializer):
    userId = serializers.IntegerField(source="user_id", read_only=True)
    firstName = serializers.CharField(source="user.first_name", read_only=True)
    lastName = serializers.CharField(source="user.last_name", read_only=True)
    email = serializers.EmailField(source="user.email", read_only=True)
    joinedAt = serializers.DateTimeField(source="created_at", read_only=True)

    class Meta:
        model = GroupMembership
        fields = ["id", "userId", "firstName", "lastName", "email", "source", "joinedAt"]
        read_only_fields = fields


class GroupCapacityResponseSerializer(serializers.Serializer):
    capacity = serializers.DictField()
