from orgflow.exceptions import QuotaExceededError
from orgflow.models import OrganizationPlan

SEAT_LIMIT_EXCEEDED = 'Seat limit has been exceeded'


def check_seat_limit(plan: OrganizationPlan, member_count: int, seats_to_add: int = 1):
    """Raises ``QuotaExceededError`` when adding members would go over the plan's seat limit."""
    if plan.has_unlimited_seats:
        return
    if member_count + seats_to_add > plan.seat_limit:
        raise QuotaExceededError(SEAT_LIMIT_EXCEEDED)
