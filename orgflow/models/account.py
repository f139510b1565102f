"""
Account model
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from .base_model import BaseModel, default_datetime


@dataclass(repr=False)
class Account(BaseModel):
    """A person who can belong to an organization team."""
    __table__ = 'account'

    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    account_created_at: datetime = field(default_factory=default_datetime)

    def __repr__(self) -> str:
        return f"Account(entity_id={self.entity_id!r}, email={self.email!r})"

    def validate_email(self):
        if not self.email or '@' not in self.email:
            return f"Invalid email for account: {self.email!r}"
        return None
