"""
Repositories for orgflow
"""
from .base_repository import BaseRepository
from .account_repository import AccountRepository
from .team_repository import TeamRepository, TeamMemberRepository
from .organization_repository import OrganizationRepository, PlanRepository
from .workspace_repository import WorkspaceRepository
from .invite_repository import InviteRepository, InsertResult
