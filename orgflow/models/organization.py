"""
Organization model
"""

from dataclasses import dataclass, field
from typing import Optional

from .base_model import BaseModel


@dataclass
class Organization(BaseModel):
    """An organization model."""
    __table__ = 'organization'

    company_name: Optional[str] = None
    owner_id: Optional[str] = field(default=None, metadata={'field_type': 'uuid'})
    plan_id: Optional[str] = field(default=None, metadata={'field_type': 'uuid'})
    # Workspaces and the team reference the organization through `organization_id`.
    # Only one of each is supported per organization.

    def validate_company_name(self):
        if not self.company_name or not self.company_name.strip():
            return "company_name must not be empty"
        return None

    def validate_owner_id(self):
        if not self.owner_id:
            return "organization must have an owner"
        return None
