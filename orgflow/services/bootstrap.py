import logging

from orgflow.data.unit_of_work import UnitOfWork
from orgflow.models import Account

logger = logging.getLogger(__name__)


class TenantBootstrap:
    """
    Seeds baseline objects for a newly created organization.

    ``generate_default_data`` runs inside the organization-creation unit of
    work, so anything it writes through ``uow`` commits or rolls back together
    with the organization. Subclass it to seed application defaults; the base
    class seeds nothing.
    """

    def generate_default_data(self, account: Account, uow: UnitOfWork, session: str):
        logger.debug("No default data to generate for account %s (session %s)", account.entity_id, session)
