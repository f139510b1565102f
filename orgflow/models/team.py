"""
OrganizationTeam model
"""

from dataclasses import dataclass, field
from typing import Optional

from .base_model import BaseModel


@dataclass
class OrganizationTeam(BaseModel):
    """A membership grouping of accounts inside an organization."""
    __table__ = 'organization_team'

    team_name: Optional[str] = None
    organization_id: Optional[str] = field(default=None, metadata={'field_type': 'uuid'})
