# tc_core/groups/capacity.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from django.utils import timezone
from rest_framework.exceptions import NotFound

from tc_core.groups.models import GroupMembership, GroupStatus, TrainingGroup


@dataclass(frozen=True)
class GroupCapacity:
    max_participants: int
    current_participants: int
    available_spots: int
    has_capacity: bool
    percentage: int

    def as_dict(self) -> dict:
        return {
            "maxParticipants": self.max_participants,
            "currentParticipants": self.current_participants,
            "availableSpots": self.available_spots,
            "hasCapacity": self.has_capacity,
            "percentage": self.percentage,
        }


def count_participants(group_id: int) -> int:
    # Always a live count; no cached counter to drift.
    return GroupMembership.objects.filter(group_id=group_id, is_active=True).count()


def capacity_for(group: TrainingGroup) -> GroupCapacity:
    current = count_participants(group.id)
    maximum = group.max_participants
    percentage = min(100, round(current * 100 / maximum)) if maximum else 100
    return GroupCapacity(
        max_participants=maximum,
        current_participants=current,
        available_spots=max(0, maximum - current),
        has_capacity=current < maximum,
        percentage=percentage,
    )


def get_capacity(group_id: int) -> GroupCapacity:
    try:
        group = TrainingGroup.objects.get(id=group_id)
    except TrainingGroup.DoesNotExist:
        raise NotFound("Group not found.")
    return capacity_for(group)


def has_capacity(group_id: int) -> bool:
    return get_capacity(group_id).has_capacity


def is_registration_open(group: TrainingGroup, *, now: datetime | None = None) -> bool:
    now = now or timezone.now()
    if group.status != GroupStatus.ACTIVE:
        return False
    if group.registration_deadline is not None and now >= group.registration_deadline:
        return False
    return capacity_for(group).has_capacity
