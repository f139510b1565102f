"""
Membership directory: validated lookups across accounts, teams and the
organization they belong to.

The current model supports exactly one team and one workspace per
organization, and an account belongs to at most one team. Lookups check
these constraints explicitly instead of picking the first element of a
list, and raise ``TenantStateError`` when stored data breaks them.
"""
import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

from orgflow.data.unit_of_work import UnitOfWork
from orgflow.exceptions import NotProvisionedError, TenantStateError
from orgflow.models import Account, Organization, OrganizationPlan, OrganizationTeam, Workspace
from orgflow.repositories import (
    AccountRepository,
    OrganizationRepository,
    PlanRepository,
    TeamMemberRepository,
    TeamRepository,
    WorkspaceRepository,
)

logger = logging.getLogger(__name__)

NOT_PROVISIONED_MESSAGE = 'You have no team, finish company setup first'


@dataclass
class TenantContext:
    """The organization an account works in, with its team, plan and workspace."""

    account: Account
    team: OrganizationTeam
    organization: Organization
    plan: OrganizationPlan
    workspace: Optional[Workspace] = None

    @property
    def is_set_up(self) -> bool:
        """True once the organization's workspace exists."""
        return self.workspace is not None

    @property
    def workspace_ids(self) -> List[str]:
        return [self.workspace.entity_id] if self.workspace else []

    def is_owner(self, account_id: str) -> bool:
        return self.organization.owner_id == account_id


def _single(items, what: str, parent: str):
    if len(items) > 1:
        raise TenantStateError(f"Expected at most one {what} for {parent}, found {len(items)}")
    return items[0] if items else None


class MembershipDirectory:
    """Read/write access to accounts, teams and their membership relation."""

    def __init__(
        self,
        accounts: AccountRepository = None,
        teams: TeamRepository = None,
        members: TeamMemberRepository = None,
        organizations: OrganizationRepository = None,
        plans: PlanRepository = None,
        workspaces: WorkspaceRepository = None
    ):
        self.accounts = accounts or AccountRepository()
        self.teams = teams or TeamRepository()
        self.members = members or TeamMemberRepository()
        self.organizations = organizations or OrganizationRepository()
        self.plans = plans or PlanRepository()
        self.workspaces = workspaces or WorkspaceRepository()

    def find_tenant(self, uow: UnitOfWork, account: Account) -> Optional[TenantContext]:
        """
        Resolves the account's team, organization, plan and workspace.

        Returns None when the account is not a member of any team yet.
        The workspace is None when the organization has no workspace.
        """
        team_id = _single(self.members.find_team_ids_for_account(uow, account.entity_id),
                          'team', f"account {account.entity_id}")
        if team_id is None:
            return None

        team = self.teams.get_by_id(uow, team_id)
        if team is None:
            raise TenantStateError(f"Team {team_id} referenced by account {account.entity_id} does not exist")

        organization = self.organizations.get_by_id(uow, team.organization_id)
        if organization is None:
            raise TenantStateError(f"Organization {team.organization_id} of team {team_id} does not exist")

        plan = self.plans.get_by_id(uow, organization.plan_id)
        if plan is None:
            raise TenantStateError(f"Plan {organization.plan_id} of organization {organization.entity_id} does not exist")

        workspace = _single(self.workspaces.find_by_organization(uow, organization.entity_id),
                            'workspace', f"organization {organization.entity_id}")

        return TenantContext(account=account, team=team, organization=organization, plan=plan, workspace=workspace)

    def require_tenant(self, uow: UnitOfWork, account: Account, message: str = NOT_PROVISIONED_MESSAGE) -> TenantContext:
        """Like ``find_tenant`` but raises ``NotProvisionedError`` when there is no team."""
        tenant = self.find_tenant(uow, account)
        if tenant is None:
            raise NotProvisionedError(message)
        return tenant

    def get_team_member(self, uow: UnitOfWork, team_id: str, account_id: str) -> Optional[Account]:
        """Returns the account only if it is a member of the team."""
        if self.members.find_membership(uow, team_id, account_id) is None:
            return None
        return self.accounts.get_by_id(uow, account_id)

    def count_team_members(self, uow: UnitOfWork, team_id: str) -> int:
        return self.members.count_members(uow, team_id)

    def list_team_members(self, uow: UnitOfWork, team_id: str, take: int, skip: int,
                          ascending: bool = False) -> Tuple[List[Account], int]:
        account_ids = self.members.find_account_ids(uow, team_id)
        return self.accounts.get_page_by_ids(uow, account_ids, take, skip, ascending)
