"""
OrganizationPlan model
"""

from dataclasses import dataclass
from typing import Optional

from .base_model import BaseModel

UNLIMITED = -1

DEFAULT_PLAN = {
    'plan_name': 'Free',
    'subscribed': True,
    'seat_limit': UNLIMITED,
    'message_limit': UNLIMITED,
}


@dataclass
class OrganizationPlan(BaseModel):
    """Quota configuration attached to one organization."""
    __table__ = 'organization_plan'

    plan_name: Optional[str] = None
    subscribed: bool = True
    seat_limit: int = UNLIMITED
    message_limit: int = UNLIMITED

    @property
    def has_unlimited_seats(self) -> bool:
        return self.seat_limit == UNLIMITED

    @property
    def has_unlimited_messages(self) -> bool:
        return self.message_limit == UNLIMITED

    def validate_seat_limit(self):
        if self.seat_limit < UNLIMITED:
            return f"seat_limit must be {UNLIMITED} or a non-negative number, got {self.seat_limit}"
        return None

    def validate_message_limit(self):
        if self.message_limit < UNLIMITED:
            return f"message_limit must be {UNLIMITED} or a non-negative number, got {self.message_limit}"
        return None
