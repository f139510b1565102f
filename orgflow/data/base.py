from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Tuple


class DuplicateKeyError(Exception):
    """Raised by an adapter when a write violates a unique constraint."""

    def __init__(self, table: str, detail: str = None):
        self.table = table
        self.detail = detail
        super().__init__(f"Duplicate key in {table}" + (f": {detail}" if detail else ""))


class DbAdapter(ABC):
    """Abstract base class for transactional database adapters.

    An adapter instance holds one connection between ``__enter__`` and
    ``__exit__`` and must not be shared between concurrent callers.
    """

    @abstractmethod
    def __enter__(self) -> 'DbAdapter':
        """Context manager entry point for preparing DB connection."""
        pass

    @abstractmethod
    def __exit__(self, exc_type, exc_value, traceback):
        """Context manager exit point for closing DB connection."""
        pass

    @abstractmethod
    def begin(self):
        """Starts a transaction; writes are not committed until ``commit``."""
        pass

    @abstractmethod
    def commit(self):
        """Commits the open transaction."""
        pass

    @abstractmethod
    def rollback(self):
        """Discards every write since ``begin``."""
        pass

    @abstractmethod
    def execute_query(self, sql: str, _vars: Any = None) -> Any:
        """Executes a raw SQL query against the DB."""
        pass

    @abstractmethod
    def get_one(self, table: str, conditions: Dict[str, Any], sort: List[Tuple[str, str]] = None,
                for_update: bool = False) -> Optional[Dict[str, Any]]:
        """Fetches a single record from the specified table based on given conditions."""
        pass

    @abstractmethod
    def get_many(self, table: str, conditions: Dict[str, Any] = None, sort: List[Tuple[str, str]] = None,
                 limit: int = None, offset: int = None) -> List[Dict[str, Any]]:
        """Fetches multiple records from the specified table based on given conditions."""
        pass

    @abstractmethod
    def get_count(self, table: str, conditions: Dict[str, Any]) -> int:
        """Counts records in the specified table matching the conditions."""
        pass

    @abstractmethod
    def insert(self, table: str, data: Dict[str, Any]) -> Dict[str, Any]:
        """Inserts a record. Raises ``DuplicateKeyError`` on unique violations."""
        pass

    @abstractmethod
    def update(self, table: str, conditions: Dict[str, Any], values: Dict[str, Any]) -> int:
        """Updates matching records and returns the number of affected rows."""
        pass

    @abstractmethod
    def delete(self, table: str, conditions: Dict[str, Any]) -> int:
        """Permanently deletes matching records and returns the number of affected rows."""
        pass
