"""
Workspace model
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional

from .base_model import BaseModel


class PushPlatform(str, Enum):
    """Push notification platforms a workspace can hold credentials for"""
    ANDROID = 'Android'
    IOS = 'iOS'

    def __str__(self):
        return str(self.value)


def default_push_platforms():
    return {platform.value: None for platform in PushPlatform}


@dataclass
class Workspace(BaseModel):
    """Operational unit of an organization."""
    __table__ = 'workspace'

    name: Optional[str] = None
    organization_id: Optional[str] = field(default=None, metadata={'field_type': 'uuid'})
    api_key: Optional[str] = None
    timezone_utc_offset: Optional[str] = None
    push_platforms: Dict[str, Optional[dict]] = field(default_factory=default_push_platforms)
