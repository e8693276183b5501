# tc_core/groups/models.py
from django.conf import settings
from django.db import models

from tc_core.common.models import TimeStampedModel


class GroupStatus(models.TextChoices):
    DRAFT = "draft", "Draft"
    ACTIVE = "active", "Active"
    FULL = "full", "Full"
    CLOSED = "closed", "Closed"
    COMPLETED = "completed", "Completed"
    CANCELLED = "cancelled", "Cancelled"


class MembershipSource(models.TextChoices):
    MANUAL = "manual", "Manual"
    INVITATION = "invitation", "Invitation"


class TrainingGroup(TimeStampedModel):
    """
    A cohort of participants for a course, optionally tied to one company.

    Stored `status` moves active <-> full automatically with membership changes;
    everything else (draft, closed, completed, cancelled) is set by staff.
    """

    name = models.CharField(max_length=255)
    description = models.TextField(blank=True, default="")
    company = models.ForeignKey(
        "companies.Company",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="groups",
    )
    course = models.ForeignKey(
        "courses.Course",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="groups",
    )
    max_participants = models.PositiveIntegerField(default=20)
    status = models.CharField(
        max_length=16,
        choices=GroupStatus.choices,
        default=GroupStatus.DRAFT,
        db_index=True,
    )
    registration_deadline = models.DateTimeField(null=True, blank=True)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="created_groups",
    )

    class Meta:
        db_table = "groups_training_group"
        ordering = ("-created_at",)
        constraints = [
            models.CheckConstraint(condition=models.Q(max_participants__gte=1), name="ck_group_max_participants_positive"),
        ]
        indexes = [
            models.Index(fields=["company", "status"]),
        ]

    def __str__(self) -> str:
        return self.name


class GroupMembership(TimeStampedModel):
    group = models.ForeignKey(TrainingGroup, on_delete=models.CASCADE, related_name="memberships")
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="group_memberships")
    is_active = models.BooleanField(default=True, db_index=True)
    source = models.CharField(max_length=16, choices=MembershipSource.choices, default=MembershipSource.MANUAL)
    invitation = models.ForeignKey(
        "invitations.InvitationCode",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="memberships",
    )

    class Meta:
        db_table = "groups_membership"
        constraints = [
            models.UniqueConstraint(fields=["group", "user"], name="uq_group_membership_user"),
        ]
        indexes = [
            models.Index(fields=["group", "is_active"]),
        ]

    def __str__(self) -> str:
        return f"{self.user_id} in {self.group_id}"
