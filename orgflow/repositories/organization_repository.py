from orgflow.data.unit_of_work import UnitOfWork
from orgflow.models import Organization, OrganizationPlan
from .base_repository import BaseRepository


class OrganizationRepository(BaseRepository):
    def __init__(self):
        super().__init__(Organization)

    def update_company_name(self, uow: UnitOfWork, organization_id: str, company_name: str) -> int:
        return self.update_by_id(uow, organization_id, {'company_name': company_name})

    def set_owner(self, uow: UnitOfWork, organization_id: str, owner_id: str) -> int:
        return self.update_by_id(uow, organization_id, {'owner_id': owner_id})


class PlanRepository(BaseRepository):
    def __init__(self):
        super().__init__(OrganizationPlan)
