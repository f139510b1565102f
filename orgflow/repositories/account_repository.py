from typing import List, Optional, Tuple

from orgflow.data.unit_of_work import UnitOfWork
from orgflow.models import Account, TeamMember
from .base_repository import BaseRepository


class AccountRepository(BaseRepository):
    def __init__(self):
        super().__init__(Account)

    def find_by_email(self, uow: UnitOfWork, email: str) -> Optional[Account]:
        return self.get_one(uow, {'email': email})

    def lock(self, uow: UnitOfWork, account_id: str) -> Optional[Account]:
        """Reads the account row and holds a write lock on it until the unit of work ends."""
        return self.get_by_id(uow, account_id, for_update=True)

    def remove(self, uow: UnitOfWork, account_id: str) -> bool:
        """Deletes an account together with its team memberships."""
        uow.adapter.delete(TeamMember.table_name(), {'account_id': account_id})
        return self.delete_where(uow, {'entity_id': account_id}) > 0

    def get_page_by_ids(
        self,
        uow: UnitOfWork,
        account_ids: List[str],
        take: int,
        skip: int,
        ascending: bool = False
    ) -> Tuple[List[Account], int]:
        """Returns one page of the given accounts ordered by creation time, plus the total count."""
        if not account_ids:
            return [], 0
        conditions = {'entity_id': list(account_ids)}
        total = self.get_count(uow, conditions)
        accounts = self.get_many(
            uow,
            conditions,
            sort=[('account_created_at', 'ASC' if ascending else 'DESC')],
            limit=take,
            offset=skip
        )
        return accounts, total
