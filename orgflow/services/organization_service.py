"""
Organization lifecycle workflows: creation, update, invites, ownership
transfer and member removal.
"""
import json
import logging
import math
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Callable, Iterable, Optional

from orgflow.auth.api_keys import generate_api_key
from orgflow.data.base import DbAdapter, DuplicateKeyError
from orgflow.data.unit_of_work import UnitOfWork
from orgflow.directory.membership import MembershipDirectory, TenantContext
from orgflow.exceptions import (
    ConflictError,
    DuplicateError,
    ForbiddenError,
    NotAcceptableError,
    NotFoundError,
    NotProvisionedError,
    OrganizationError,
    TransactionFailedError,
)
from orgflow.models import (
    DEFAULT_PLAN,
    Account,
    ModelValidationError,
    Organization,
    OrganizationInvite,
    OrganizationPlan,
    OrganizationTeam,
    PushPlatform,
    Workspace,
)
from orgflow.notifications.dispatcher import NotificationDispatcher
from orgflow.quota.message_quota import MessageQuotaOracle
from orgflow.quota.seats import check_seat_limit
from orgflow.repositories import InsertResult, InviteRepository

from .bootstrap import TenantBootstrap

logger = logging.getLogger(__name__)

DEFAULT_TEAM_NAME = 'Default team'

ALREADY_SET_UP = 'You have already setup organization'
ALREADY_INVITED = 'This user already invited.'
ALREADY_REGISTERED = 'This user already have registered account.'
NO_RIGHTS_TO_MOVE_OWNERSHIP = "You don't have rights to move ownership"
NO_RIGHTS_TO_DELETE = "You don't have rights to delete user"
OWNER_CANNOT_BE_DELETED = "Owner can't be deleted"
NOT_PART_OF_ORGANIZATION = 'This user not part of organization'
NO_ACCESS_TO_DISCONNECT = "You don't have access to disconnect credentials."
INVITE_NOT_FOUND = 'No such invite found.'


@dataclass
class InviteResult:
    """A committed invite. ``notified`` is False when the email job could not be enqueued."""
    invite: OrganizationInvite
    invite_link: str
    notified: bool


@dataclass
class InviteStatus:
    invite: OrganizationInvite
    organization: Organization
    owner: Optional[Account]


class OrganizationService:
    """
    Composes the membership directory, invite ledger, quota checks and the
    notification dispatcher into the organization workflows.

    Each workflow call acquires its own ``UnitOfWork`` from
    ``adapter_factory``; nothing connection-bound is kept on the service, so
    one instance serves concurrent requests.
    """

    def __init__(
        self,
        adapter_factory: Callable[[], DbAdapter],
        dispatcher: NotificationDispatcher,
        quota_oracle: MessageQuotaOracle,
        frontend_url: str,
        directory: MembershipDirectory = None,
        invites: InviteRepository = None,
        bootstrap: TenantBootstrap = None,
        api_key_generator: Callable[[], str] = generate_api_key
    ):
        self._adapter_factory = adapter_factory
        self.dispatcher = dispatcher
        self.quota_oracle = quota_oracle
        self.frontend_url = frontend_url.rstrip('/')
        self.directory = directory or MembershipDirectory()
        self.invites = invites or InviteRepository()
        self.bootstrap = bootstrap or TenantBootstrap()
        self._generate_api_key = api_key_generator

    def _context(self, method: str, session: str, user: str = 'ANONYMOUS') -> str:
        return json.dumps({
            'class': type(self).__name__,
            'method': method,
            'session': session,
            'user': user,
        })

    @staticmethod
    def _extra(method: str, session: str, user: str) -> dict:
        return {'method': method, 'session': session, 'user': user}

    def log(self, message, method, session, user='ANONYMOUS'):
        logger.info("%s %s", message, self._context(method, session, user),
                    extra=self._extra(method, session, user))

    def debug(self, message, method, session, user='ANONYMOUS'):
        logger.debug("%s %s", message, self._context(method, session, user),
                     extra=self._extra(method, session, user))

    def error(self, error, method, session, user='ANONYMOUS'):
        logger.error("%s %s", error, self._context(method, session, user), exc_info=error,
                     extra=self._extra(method, session, user))

    def _unit_of_work(self) -> UnitOfWork:
        return UnitOfWork(self._adapter_factory())

    @contextmanager
    def _write_workflow(self, method: str, session: str, user: str, failure_message: str,
                        duplicate_message: str = None):
        """
        Runs the block in one unit of work.

        Taxonomy errors and model validation errors propagate unchanged.
        Anything else is logged with its stack and re-raised as a
        ``TransactionFailedError`` carrying ``failure_message``. With
        ``duplicate_message`` set, a unique violation (including one reported
        at commit) becomes a ``DuplicateError`` instead.
        """
        try:
            with self._unit_of_work() as uow:
                yield uow
        except (OrganizationError, ModelValidationError):
            raise
        except DuplicateKeyError as err:
            if duplicate_message is None:
                self.error(err, method, session, user)
                raise TransactionFailedError(failure_message) from err
            raise DuplicateError(duplicate_message) from err
        except Exception as err:
            self.error(err, method, session, user)
            raise TransactionFailedError(failure_message) from err

    # Will need update for multiple workspaces and organization management
    def create(self, account: Account, name: str, timezone_utc_offset: str, session: str) -> TenantContext:
        """
        Creates the account's organization with its plan, workspace and default team.

        Raises:
            ConflictError: the account already belongs to a team.
            TransactionFailedError: anything else failed; nothing was persisted.
        """
        with self._write_workflow('create', session, account.entity_id, 'Error during creation') as uow:
            if self.directory.accounts.lock(uow, account.entity_id) is None:
                raise NotFoundError(f"Account {account.entity_id} does not exist")

            # Any existing membership, with or without a workspace, blocks a second team.
            if self.directory.find_tenant(uow, account) is not None:
                raise ConflictError(ALREADY_SET_UP)

            plan = self.directory.plans.create(uow, OrganizationPlan(**DEFAULT_PLAN))
            organization = self.directory.organizations.create(uow, Organization(
                company_name=name,
                owner_id=account.entity_id,
                plan_id=plan.entity_id
            ))
            workspace = self.directory.workspaces.create(uow, Workspace(
                name=f"{organization.company_name} workspace",
                organization_id=organization.entity_id,
                api_key=self._generate_api_key(),
                timezone_utc_offset=timezone_utc_offset
            ))
            team = self.directory.teams.create(uow, OrganizationTeam(
                team_name=DEFAULT_TEAM_NAME,
                organization_id=organization.entity_id
            ))
            self.directory.members.add_member(uow, team.entity_id, account.entity_id)

            self.bootstrap.generate_default_data(account, uow, session)

        self.log(f"Created organization {organization.entity_id}", 'create', session, account.entity_id)
        return TenantContext(account=account, team=team, organization=organization, plan=plan, workspace=workspace)

    # Will need update for multiple workspaces and organization management
    def update(self, account: Account, name: str, timezone_utc_offset: str, session: str):
        """Renames the organization and changes its workspace's timezone offset."""
        with self._write_workflow('update', session, account.entity_id, 'Error during update') as uow:
            tenant = self.directory.require_tenant(uow, account)
            if not tenant.is_set_up:
                raise NotProvisionedError('Organization has no workspace, finish company setup first')
            renamed = Organization(company_name=name, owner_id=tenant.organization.owner_id,
                                   plan_id=tenant.organization.plan_id)
            renamed.validate()
            self.directory.organizations.update_company_name(uow, tenant.organization.entity_id, name)
            self.directory.workspaces.update_timezone(uow, tenant.workspace.entity_id, timezone_utc_offset)

    def get_team_members(self, account: Account, take: int = 10, skip: int = 0, is_asc: bool = False) -> dict:
        """Returns one page of the account's team members ordered by account creation time."""
        if take <= 0:
            raise ValueError("take must be positive")
        if skip < 0:
            raise ValueError("skip must not be negative")
        with self._unit_of_work() as uow:
            tenant = self.directory.require_tenant(uow, account)
            members, total = self.directory.list_team_members(
                uow, tenant.team.entity_id, take=take, skip=skip, ascending=is_asc)

        return {
            'data': [
                {
                    'id': member.entity_id,
                    'name': member.first_name,
                    'last_name': member.last_name,
                    'email': member.email,
                    'created_at': member.account_created_at,
                } for member in members
            ],
            'total': total,
            'page': skip // take + 1,
            'page_count': math.ceil(total / take),
        }

    def build_invite_link(self, invite_id: str) -> str:
        return f"{self.frontend_url}/confirm-invite/{invite_id}"

    def invite_member(self, account: Account, email: str, session: str) -> InviteResult:
        """
        Records a pending invite and enqueues the invite email after commit.

        The seat, pending-invite and registered-account checks run before the
        writing transaction and are best effort. The (organization, email)
        unique constraint decides between concurrent invites for the same
        address.

        Raises:
            QuotaExceededError: the team is at its plan's seat limit.
            DuplicateError: the address is already invited or registered.
        """
        email = (email or '').strip().lower()
        invite = OrganizationInvite(email=email)
        invite.validate()

        with self._unit_of_work() as uow:
            tenant = self.directory.require_tenant(uow, account)
            members_count = self.directory.count_team_members(uow, tenant.team.entity_id)
            check_seat_limit(tenant.plan, members_count)

            if self.invites.find_pending(uow, tenant.organization.entity_id, email):
                raise DuplicateError(ALREADY_INVITED)
            if self.directory.accounts.find_by_email(uow, email):
                raise DuplicateError(ALREADY_REGISTERED)

        invite.organization_id = tenant.organization.entity_id
        invite.team_id = tenant.team.entity_id

        with self._write_workflow('invite_member', session, account.entity_id, 'Error during invite',
                                  duplicate_message=ALREADY_INVITED) as uow:
            if self.invites.record(uow, invite) is InsertResult.DUPLICATE_KEY:
                raise DuplicateError(ALREADY_INVITED)

        invite_link = self.build_invite_link(invite.entity_id)
        self.log(f"Invited {email} to organization {invite.organization_id}",
                 'invite_member', session, account.entity_id)

        notified = self._notify_invite(email, tenant.organization.company_name, invite_link,
                                       session, account.entity_id)
        return InviteResult(invite=invite, invite_link=invite_link, notified=notified)

    def _notify_invite(self, email: str, organization_name: str, invite_link: str, session: str, user: str) -> bool:
        # The invite is committed at this point and stands whatever happens here.
        try:
            self.dispatcher.send_invite(email, organization_name, invite_link)
        except Exception as err:  # pylint: disable=W0718
            self.error(err, 'invite_member', session, user)
            return False
        return True

    def disconnect_push_platform(self, account: Account, platform: str, session: str):
        """Removes the stored credential of one push notification platform from the workspace."""
        try:
            platform = PushPlatform(platform)
        except ValueError:
            raise ModelValidationError(f"Unknown push platform: {platform!r}") from None

        with self._write_workflow('disconnect_push_platform', session, account.entity_id,
                                  'Error during disconnect') as uow:
            tenant = self.directory.find_tenant(uow, account)
            if tenant is None or not tenant.is_set_up:
                raise NotProvisionedError(NO_ACCESS_TO_DISCONNECT)

            push_platforms = dict(tenant.workspace.push_platforms or {})
            push_platforms[platform.value] = None
            self.directory.workspaces.update_push_platforms(uow, tenant.workspace.entity_id, push_platforms)

    def transfer_owner_rights(self, account: Account, team_member_account_id: str, session: str):
        """
        Makes another member of the owner's team the organization owner.

        Raises:
            ForbiddenError: the requester is not the owner.
            NotAcceptableError: the target is not a member of the team.
        """
        with self._write_workflow('transfer_owner_rights', session, account.entity_id,
                                  'Error during ownership transfer') as uow:
            tenant = self.directory.require_tenant(uow, account)
            if not tenant.is_owner(account.entity_id):
                raise ForbiddenError(NO_RIGHTS_TO_MOVE_OWNERSHIP)

            new_owner = self.directory.get_team_member(uow, tenant.team.entity_id, team_member_account_id)
            if new_owner is None:
                raise NotAcceptableError(NOT_PART_OF_ORGANIZATION)

            self.directory.organizations.set_owner(uow, tenant.organization.entity_id, new_owner.entity_id)

        self.log(f"Moved ownership of {tenant.organization.entity_id} to {team_member_account_id}",
                 'transfer_owner_rights', session, account.entity_id)

    def delete_member_account(self, account: Account, team_member_account_id: str, session: str):
        """
        Deletes a member account.

        The owner can never be deleted. Other members may delete only
        themselves; the owner may delete anyone else on the team.
        """
        with self._write_workflow('delete_member_account', session, account.entity_id,
                                  'Error during member removal') as uow:
            tenant = self.directory.require_tenant(uow, account)
            owner_id = tenant.organization.owner_id

            if team_member_account_id == owner_id:
                raise NotAcceptableError(OWNER_CANNOT_BE_DELETED)
            if team_member_account_id != account.entity_id and account.entity_id != owner_id:
                raise NotAcceptableError(NO_RIGHTS_TO_DELETE)

            found_account = self.directory.get_team_member(uow, tenant.team.entity_id, team_member_account_id)
            if found_account is None:
                raise NotAcceptableError(NOT_PART_OF_ORGANIZATION)

            self.directory.accounts.remove(uow, found_account.entity_id)

        self.log(f"Deleted account {team_member_account_id}", 'delete_member_account', session, account.entity_id)

    def check_invite_status(self, invite_id: str, session: str) -> InviteStatus:
        """Looks up a pending invite with its organization and the organization's owner."""
        with self._unit_of_work() as uow:
            invite = self.invites.get_by_id(uow, invite_id)
            if invite is None:
                self.debug(f"Invite {invite_id} not found", 'check_invite_status', session)
                raise NotFoundError(INVITE_NOT_FOUND)
            organization = self.directory.organizations.get_by_id(uow, invite.organization_id)
            if organization is None:
                raise NotFoundError(INVITE_NOT_FOUND)
            owner = self.directory.accounts.get_by_id(uow, organization.owner_id)

        return InviteStatus(invite=invite, organization=organization, owner=owner)

    def check_organization_message_limit(self, workspace_ids: Iterable[str], messages_to_send: int = 1,
                                         customer_message_limit: int = None) -> Optional[int]:
        return self.quota_oracle.check_organization_message_limit(
            workspace_ids, messages_to_send, customer_message_limit)

    def check_message_limit(self, account: Account, messages_to_send: int = 1) -> Optional[int]:
        """
        Checks the account's organization against its plan's message limit.

        Returns the current count, or None when the plan is unlimited or the
        organization has no workspace.
        """
        with self._unit_of_work() as uow:
            tenant = self.directory.require_tenant(uow, account)

        if tenant.plan.has_unlimited_messages:
            return None
        return self.quota_oracle.check_organization_message_limit(
            tenant.workspace_ids, messages_to_send, tenant.plan.message_limit)
