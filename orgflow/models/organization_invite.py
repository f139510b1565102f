"""
OrganizationInvite model
"""

from dataclasses import dataclass, field
from typing import Optional

from .base_model import BaseModel


@dataclass
class OrganizationInvite(BaseModel):
    """A pending invitation, unique per (organization, email)."""
    __table__ = 'organization_invite'

    email: Optional[str] = None
    organization_id: Optional[str] = field(default=None, metadata={'field_type': 'uuid'})
    team_id: Optional[str] = field(default=None, metadata={'field_type': 'uuid'})

    def validate_email(self):
        if not self.email or '@' not in self.email:
            return f"Invalid invite email: {self.email!r}"
        return None
