"""
Tests for MembershipDirectory tenant resolution and the repositories it uses.
"""
import pytest

from orgflow.data.unit_of_work import UnitOfWork
from orgflow.directory import MembershipDirectory
from orgflow.exceptions import NotProvisionedError, TenantStateError
from orgflow.models import OrganizationInvite, OrganizationTeam, Workspace
from orgflow.repositories import InsertResult, InviteRepository


@pytest.fixture
def directory():
    return MembershipDirectory()


@pytest.fixture
def uow(db_adapter_factory):
    with UnitOfWork(db_adapter_factory()) as unit_of_work:
        yield unit_of_work


def test_account_without_team_has_no_tenant(directory, uow, owner):
    assert directory.find_tenant(uow, owner) is None
    with pytest.raises(NotProvisionedError) as exc_info:
        directory.require_tenant(uow, owner)
    assert str(exc_info.value) == 'You have no team, finish company setup first'


def test_find_tenant_resolves_everything(directory, uow, owner, tenant):
    found = directory.find_tenant(uow, owner)

    assert found.team.entity_id == tenant.team.entity_id
    assert found.organization.entity_id == tenant.organization.entity_id
    assert found.plan.entity_id == tenant.plan.entity_id
    assert found.workspace.entity_id == tenant.workspace.entity_id
    assert found.is_set_up
    assert found.is_owner(owner.entity_id)
    assert found.workspace_ids == [tenant.workspace.entity_id]


def test_second_workspace_is_a_tenant_state_error(directory, uow, owner, tenant):
    """
    Test that an organization with two workspaces is reported, not silently reduced to one.
    """
    directory.workspaces.create(uow, Workspace(
        name='Extra', organization_id=tenant.organization.entity_id, api_key='another-key'))

    with pytest.raises(TenantStateError):
        directory.find_tenant(uow, owner)


def test_second_team_membership_is_a_tenant_state_error(directory, uow, owner, tenant):
    team = directory.teams.create(uow, OrganizationTeam(
        team_name='Second', organization_id=tenant.organization.entity_id))
    directory.members.add_member(uow, team.entity_id, owner.entity_id)

    with pytest.raises(TenantStateError):
        directory.find_tenant(uow, owner)


def test_get_team_member_requires_membership(directory, uow, tenant, add_member, make_account):
    member = add_member('member@example.com')
    outsider = make_account('outsider@example.com')

    assert directory.get_team_member(uow, tenant.team.entity_id, member.entity_id).email == 'member@example.com'
    assert directory.get_team_member(uow, tenant.team.entity_id, outsider.entity_id) is None
    assert directory.count_team_members(uow, tenant.team.entity_id) == 2


def test_invite_ledger_reports_duplicate_key(uow, tenant):
    """
    Test that the unique (organization, email) key is reported as a result, not raised.
    """
    invites = InviteRepository()

    def invite():
        return OrganizationInvite(email='new@example.com', organization_id=tenant.organization.entity_id,
                                  team_id=tenant.team.entity_id)

    assert invites.record(uow, invite()) is InsertResult.OK
    assert invites.record(uow, invite()) is InsertResult.DUPLICATE_KEY
    assert invites.find_pending(uow, tenant.organization.entity_id, 'new@example.com') is not None


def test_consume_invite(uow, tenant):
    invites = InviteRepository()
    invite = OrganizationInvite(email='new@example.com', organization_id=tenant.organization.entity_id,
                                team_id=tenant.team.entity_id)
    invites.record(uow, invite)

    assert invites.consume(uow, invite.entity_id) is True
    assert invites.consume(uow, invite.entity_id) is False


def test_remove_account_deletes_memberships(directory, uow, store, tenant, add_member):
    member = add_member('member@example.com')

    assert directory.accounts.remove(uow, member.entity_id) is True
    assert store.count('team_member') == 1
    assert directory.accounts.find_by_email(uow, 'member@example.com') is None
