from typing import List, Optional

from orgflow.data.unit_of_work import UnitOfWork
from orgflow.models import OrganizationTeam, TeamMember
from .base_repository import BaseRepository


class TeamRepository(BaseRepository):
    def __init__(self):
        super().__init__(OrganizationTeam)


class TeamMemberRepository(BaseRepository):
    """Many-to-many relation between teams and accounts."""

    def __init__(self):
        super().__init__(TeamMember)

    def add_member(self, uow: UnitOfWork, team_id: str, account_id: str) -> TeamMember:
        return self.create(uow, TeamMember(team_id=team_id, account_id=account_id))

    def find_membership(self, uow: UnitOfWork, team_id: str, account_id: str) -> Optional[TeamMember]:
        return self.get_one(uow, {'team_id': team_id, 'account_id': account_id})

    def find_team_ids_for_account(self, uow: UnitOfWork, account_id: str) -> List[str]:
        return [member.team_id for member in self.get_many(uow, {'account_id': account_id})]

    def find_account_ids(self, uow: UnitOfWork, team_id: str) -> List[str]:
        return [member.account_id for member in self.get_many(uow, {'team_id': team_id})]

    def count_members(self, uow: UnitOfWork, team_id: str) -> int:
        return self.get_count(uow, {'team_id': team_id})
