# tc_core/invitations/models.py
from django.conf import settings
from django.db import models
from django.db.models import F, Q

from tc_core.common.models import TimeStampedModel

MAX_USES_LIMIT = 1000


class InvitationScope(models.TextChoices):
    COMPANY = "company", "Company"
    GROUP = "group", "Group"


class InvitationCode(TimeStampedModel):
    """
    Shareable token granting membership in a company or a training group.

    Usable iff is_active AND now < expires_at AND current_uses < max_uses.
    Codes are never deleted, only deactivated or left to expire.
    `current_uses` only ever moves up, through the conditional update in
    EnrollmentLinker.
    """

    code = models.CharField(max_length=32, unique=True)  # stored upper-case
    scope = models.CharField(max_length=16, choices=InvitationScope.choices, db_index=True)

    company = models.ForeignKey(
        "companies.Company",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="invitation_codes",
    )
    group = models.ForeignKey(
        "groups.TrainingGroup",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="invitation_codes",
    )

    max_uses = models.PositiveIntegerField()
    current_uses = models.PositiveIntegerField(default=0)
    expires_at = models.DateTimeField(db_index=True)
    is_active = models.BooleanField(default=True, db_index=True)
    deactivated_at = models.DateTimeField(null=True, blank=True)

    description = models.TextField(blank=True, default="")  # group-scoped only

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="created_invitation_codes",
    )

    class Meta:
        db_table = "invitations_invitation_code"
        ordering = ("-created_at",)
        constraints = [
            models.CheckConstraint(
                condition=Q(max_uses__gte=1) & Q(max_uses__lte=MAX_USES_LIMIT),
                name="ck_invitation_max_uses_range",
            ),
            models.CheckConstraint(
                condition=Q(current_uses__lte=F("max_uses")),
                name="ck_invitation_uses_within_max",
            ),
            models.CheckConstraint(
                condition=(
                    Q(scope=InvitationScope.COMPANY, company__isnull=False, group__isnull=True)
                    | Q(scope=InvitationScope.GROUP, group__isnull=False, company__isnull=True)
                ),
                name="ck_invitation_single_target",
            ),
        ]
        indexes = [
            models.Index(fields=["company", "is_active"]),
            models.Index(fields=["group", "is_active"]),
        ]

    def __str__(self) -> str:
        return f"{self.code} ({self.scope})"

    @property
    def target_id(self) -> int:
        return self.company_id if self.scope == InvitationScope.COMPANY else self.group_id

    @property
    def remaining_uses(self) -> int:
        return max(0, self.max_uses - self.current_uses)

    def is_expired(self, now) -> bool:
        return now >= self.expires_at

    def is_usable(self, now) -> bool:
        return self.is_active and not self.is_expired(now) and self.current_uses < self.max_uses


class InvitationRedemption(models.Model):
    """
    One row per (code, registrant). A code is consumed at most once per person.
    """

    invitation = models.ForeignKey(InvitationCode, on_delete=models.PROTECT, related_name="redemptions")
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="invitation_redemptions")
    redeemed_at = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        db_table = "invitations_redemption"
        constraints = [
            models.UniqueConstraint(fields=["invitation", "user"], name="uq_redemption_invitation_user"),
        ]

    def __str__(self) -> str:
        return f"{self.invitation_id} by {self.user_id}"
