"""
Models for orgflow
"""

from .base_model import BaseModel, ModelValidationError, default_datetime, get_uuid_hex
from .account import Account
from .organization_plan import OrganizationPlan, DEFAULT_PLAN, UNLIMITED
from .organization import Organization
from .workspace import Workspace, PushPlatform
from .team import OrganizationTeam
from .team_member import TeamMember
from .organization_invite import OrganizationInvite
