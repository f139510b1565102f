from .bootstrap import TenantBootstrap
from .organization_service import OrganizationService, InviteResult, InviteStatus, DEFAULT_TEAM_NAME
