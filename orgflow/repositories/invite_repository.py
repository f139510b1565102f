"""
Invite ledger: pending organization invitations.
"""
import logging
from enum import Enum
from typing import Optional

from orgflow.data.base import DuplicateKeyError
from orgflow.data.unit_of_work import UnitOfWork
from orgflow.models import OrganizationInvite
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class InsertResult(Enum):
    """Outcome of recording an invite"""
    OK = 'ok'
    DUPLICATE_KEY = 'duplicate_key'


class InviteRepository(BaseRepository):
    def __init__(self):
        super().__init__(OrganizationInvite)

    def find_pending(self, uow: UnitOfWork, organization_id: str, email: str) -> Optional[OrganizationInvite]:
        return self.get_one(uow, {'organization_id': organization_id, 'email': email})

    def record(self, uow: UnitOfWork, invite: OrganizationInvite) -> InsertResult:
        """
        Inserts a pending invite.

        The (organization_id, email) unique constraint is the authority on
        duplicates; a violation is reported as ``InsertResult.DUPLICATE_KEY``
        instead of an exception.
        """
        try:
            self.create(uow, invite)
        except DuplicateKeyError as ex:
            logger.info("Invite for %s in organization %s already exists (%s)",
                        invite.email, invite.organization_id, ex.detail)
            return InsertResult.DUPLICATE_KEY
        return InsertResult.OK

    def consume(self, uow: UnitOfWork, invite_id: str) -> bool:
        """Deletes an invite once it has been accepted."""
        return self.delete_where(uow, {'entity_id': invite_id}) > 0
