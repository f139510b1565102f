"""
base repository for orgflow
"""
from typing import Any, Dict, List, Optional, Type

from orgflow.data.unit_of_work import UnitOfWork
from orgflow.models.base_model import BaseModel, default_datetime


class BaseRepository:
    """
    BaseRepository class

    Repositories hold no connection state. Every call receives the
    ``UnitOfWork`` it runs in, so one repository instance is safe to share
    between concurrent requests.
    """

    def __init__(self, model: Type[BaseModel]):
        self.model = model
        self.table_name = model.table_name()

    def _process_data_before_save(self, instance: BaseModel) -> Dict[str, Any]:
        """Convert a model instance to a data dictionary for the adapter."""
        instance.prepare_for_save()
        return instance.as_dict(convert_datetime_to_iso_string=False)

    def get_one(
        self,
        uow: UnitOfWork,
        conditions: Dict[str, Any],
        for_update: bool = False
    ) -> Optional[BaseModel]:
        """
        Fetches a single record from the repository's table based on given conditions.

        :param uow: unit of work to run in
        :param conditions: filter conditions
        :param for_update: lock the row until the unit of work ends
        :return: a model instance if found, None otherwise
        """
        data = uow.adapter.get_one(self.table_name, conditions, for_update=for_update)
        if not data:
            return None
        return self.model.from_dict(data)

    def get_by_id(self, uow: UnitOfWork, entity_id: str, for_update: bool = False) -> Optional[BaseModel]:
        return self.get_one(uow, {'entity_id': entity_id}, for_update=for_update)

    def get_many(
        self,
        uow: UnitOfWork,
        conditions: Dict[str, Any] = None,
        sort: List[tuple] = None,
        limit: int = None,
        offset: int = None
    ) -> List[BaseModel]:
        """
        Fetches multiple records from the repository's table based on given conditions.

        :param uow: unit of work to run in
        :param conditions: filter conditions
        :param sort: sort order
        :param limit: maximum number of records to return
        :param offset: number of records to skip before returning results
        :return: list of model instances
        """
        records = uow.adapter.get_many(self.table_name, conditions, sort, limit, offset)
        return [self.model.from_dict(record) for record in records]

    def get_count(self, uow: UnitOfWork, conditions: Dict[str, Any] = None) -> int:
        return uow.adapter.get_count(self.table_name, conditions or {})

    def create(self, uow: UnitOfWork, instance: BaseModel) -> BaseModel:
        """
        Inserts a new model instance.

        Raises ``DuplicateKeyError`` when the row breaks a unique constraint.
        """
        data = self._process_data_before_save(instance)
        uow.adapter.insert(self.table_name, data)
        return instance

    def update_by_id(self, uow: UnitOfWork, entity_id: str, values: Dict[str, Any]) -> int:
        """Updates the given columns of one row, bumping ``changed_on``."""
        values = dict(values)
        values['changed_on'] = default_datetime()
        return uow.adapter.update(self.table_name, {'entity_id': entity_id}, values)

    def delete_where(self, uow: UnitOfWork, conditions: Dict[str, Any]) -> int:
        return uow.adapter.delete(self.table_name, conditions)
