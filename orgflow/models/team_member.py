"""
TeamMember model
"""

from dataclasses import dataclass, field
from typing import Optional

from .base_model import BaseModel


@dataclass
class TeamMember(BaseModel):
    """Relation row between a team and one of its member accounts."""
    __table__ = 'team_member'

    team_id: Optional[str] = field(default=None, metadata={'field_type': 'uuid'})
    account_id: Optional[str] = field(default=None, metadata={'field_type': 'uuid'})
