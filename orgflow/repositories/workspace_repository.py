from typing import List

from orgflow.data.unit_of_work import UnitOfWork
from orgflow.models import Workspace
from .base_repository import BaseRepository


class WorkspaceRepository(BaseRepository):
    def __init__(self):
        super().__init__(Workspace)

    def find_by_organization(self, uow: UnitOfWork, organization_id: str) -> List[Workspace]:
        return self.get_many(uow, {'organization_id': organization_id})

    def update_timezone(self, uow: UnitOfWork, workspace_id: str, timezone_utc_offset: str) -> int:
        return self.update_by_id(uow, workspace_id, {'timezone_utc_offset': timezone_utc_offset})

    def update_push_platforms(self, uow: UnitOfWork, workspace_id: str, push_platforms: dict) -> int:
        return self.update_by_id(uow, workspace_id, {'push_platforms': push_platforms})
