"""
Shared pytest fixtures for orgflow tests.

This module provides:
- An in-memory transactional DbAdapter with unique-key enforcement
- A recording message adapter in place of a real queue
- A fake ClickHouse adapter with a settable message count
- A fully wired OrganizationService
"""
import copy
import threading
from collections import defaultdict
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional, Tuple

import pytest

from orgflow.data.base import DbAdapter, DuplicateKeyError
from orgflow.data.schema import UNIQUE_KEYS
from orgflow.data.unit_of_work import UnitOfWork
from orgflow.emailing.config import EmailConfig
from orgflow.messaging.base import MessageAdapter
from orgflow.models import Account
from orgflow.notifications.dispatcher import NotificationDispatcher
from orgflow.quota.message_quota import MessageQuotaOracle
from orgflow.repositories import AccountRepository, TeamMemberRepository
from orgflow.services import OrganizationService

FRONTEND_URL = 'https://app.example.com'


class InMemoryStore:
    """Tables shared by every adapter created for one test."""

    def __init__(self):
        self.tables: Dict[str, Dict[str, dict]] = defaultdict(dict)
        self.lock = threading.RLock()
        self.statements: List[str] = []

    def rows(self, table: str) -> List[dict]:
        with self.lock:
            return [copy.deepcopy(row) for row in self.tables[table].values()]

    def count(self, table: str) -> int:
        with self.lock:
            return len(self.tables[table])


def _matches(row: dict, conditions: Optional[Dict[str, Any]]) -> bool:
    for key, value in (conditions or {}).items():
        if isinstance(value, (list, tuple, set)):
            if row.get(key) not in value:
                return False
        elif row.get(key) != value:
            return False
    return True


class InMemoryDbAdapter(DbAdapter):
    """
    DbAdapter over an InMemoryStore.

    Writes are applied immediately and journaled; ``rollback`` undoes them.
    Unique keys from the schema are checked on insert under the store lock,
    so concurrent inserts of the same key fail the way the database would.
    """

    def __init__(self, store: InMemoryStore):
        self.store = store
        self._journal = None
        self.entered = False
        self.committed = False
        self.rolled_back = False

    def __enter__(self):
        self.entered = True
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.entered = False

    def begin(self):
        self._journal = []

    def commit(self):
        self._journal = None
        self.committed = True

    def rollback(self):
        with self.store.lock:
            for undo in reversed(self._journal or []):
                undo()
        self._journal = None
        self.rolled_back = True

    def _record(self, undo):
        if self._journal is not None:
            self._journal.append(undo)

    def execute_query(self, sql: str, _vars: Any = None) -> Any:
        self.store.statements.append(sql)
        return []

    def get_one(self, table: str, conditions: Dict[str, Any], sort: List[Tuple[str, str]] = None,
                for_update: bool = False) -> Optional[Dict[str, Any]]:
        rows = self.get_many(table, conditions, sort, limit=1)
        return rows[0] if rows else None

    def get_many(self, table: str, conditions: Dict[str, Any] = None, sort: List[Tuple[str, str]] = None,
                 limit: int = None, offset: int = None) -> List[Dict[str, Any]]:
        with self.store.lock:
            rows = [copy.deepcopy(row) for row in self.store.tables[table].values() if _matches(row, conditions)]
        for column, direction in reversed(sort or []):
            rows.sort(key=lambda row: row[column], reverse=direction.upper() == 'DESC')
        start = offset or 0
        end = start + limit if limit is not None else None
        return rows[start:end]

    def get_count(self, table: str, conditions: Dict[str, Any]) -> int:
        with self.store.lock:
            return sum(1 for row in self.store.tables[table].values() if _matches(row, conditions))

    def insert(self, table: str, data: Dict[str, Any]) -> Dict[str, Any]:
        with self.store.lock:
            rows = self.store.tables[table]
            if data['entity_id'] in rows:
                raise DuplicateKeyError(table, f"{table}_pkey")
            for columns in UNIQUE_KEYS.get(table, []):
                key = tuple(data.get(column) for column in columns)
                if any(tuple(row.get(column) for column in columns) == key for row in rows.values()):
                    raise DuplicateKeyError(table, f"{table}_{'_'.join(columns)}_key")
            rows[data['entity_id']] = copy.deepcopy(data)
            self._record(lambda: rows.pop(data['entity_id'], None))
        return data

    def update(self, table: str, conditions: Dict[str, Any], values: Dict[str, Any]) -> int:
        with self.store.lock:
            matched = [row for row in self.store.tables[table].values() if _matches(row, conditions)]
            for row in matched:
                previous = copy.deepcopy(row)
                row.update(copy.deepcopy(values))
                self._record(lambda row=row, previous=previous: (row.clear(), row.update(previous)))
        return len(matched)

    def delete(self, table: str, conditions: Dict[str, Any]) -> int:
        with self.store.lock:
            rows = self.store.tables[table]
            matched = [entity_id for entity_id, row in rows.items() if _matches(row, conditions)]
            for entity_id in matched:
                removed = rows.pop(entity_id)
                self._record(lambda entity_id=entity_id, removed=removed: rows.__setitem__(entity_id, removed))
        return len(matched)


class RecordingMessageAdapter(MessageAdapter):
    """Message adapter that appends every sent message to a shared list."""

    def __init__(self, sent: list, fail_with: Exception = None):
        super().__init__()
        self.sent = sent
        self.fail_with = fail_with

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        pass

    def send_message(self, queue_name: str, message: dict, routing_key: str = None):
        if self.fail_with is not None:
            raise self.fail_with
        self.sent.append({'queue_name': queue_name, 'message': message, 'routing_key': routing_key})

    def consume_messages(self, queue_name: str, callback_function=None):
        raise NotImplementedError


class FakeClickHouseAdapter:
    """Answers the message count query with a fixed value."""

    def __init__(self, count: int = 0):
        self.count = count
        self.queries = []

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        pass

    def query(self, sql: str, parameters: dict = None):
        self.queries.append((sql, parameters))
        return [{'count': self.count}]


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def db_adapter_factory(store):
    return lambda: InMemoryDbAdapter(store)


@pytest.fixture
def sent_messages():
    return []


@pytest.fixture
def message_adapter_factory(sent_messages):
    return lambda: RecordingMessageAdapter(sent_messages)


@pytest.fixture
def clickhouse():
    return FakeClickHouseAdapter()


@pytest.fixture
def email_config():
    return EmailConfig(
        EMAIL_PROVIDER='mailgun',
        EMAIL_SENDER_NAME='Orgflow',
        MAILGUN_API_KEY='key-test',
        MAILGUN_DOMAIN='mg.example.com',
        MAILGUN_SENDER='noreply'
    )


@pytest.fixture
def dispatcher(message_adapter_factory, email_config):
    return NotificationDispatcher(message_adapter_factory, email_config)


@pytest.fixture
def quota_oracle(clickhouse):
    return MessageQuotaOracle(lambda: clickhouse)


@pytest.fixture
def service(db_adapter_factory, dispatcher, quota_oracle):
    return OrganizationService(
        adapter_factory=db_adapter_factory,
        dispatcher=dispatcher,
        quota_oracle=quota_oracle,
        frontend_url=FRONTEND_URL + '/'
    )


@pytest.fixture
def make_account(db_adapter_factory):
    """Persists accounts with strictly increasing ``account_created_at``."""
    created = []
    base_time = datetime(2024, 1, 1, tzinfo=timezone.utc)

    def _make_account(email: str, first_name: str = 'Test', last_name: str = 'User') -> Account:
        account = Account(
            first_name=first_name,
            last_name=last_name,
            email=email,
            account_created_at=base_time + timedelta(minutes=len(created))
        )
        with UnitOfWork(db_adapter_factory()) as uow:
            AccountRepository().create(uow, account)
        created.append(account)
        return account

    return _make_account


@pytest.fixture
def owner(make_account):
    return make_account('owner@example.com', 'Olivia', 'Owner')


@pytest.fixture
def tenant(service, owner):
    """An organization set up by ``owner``."""
    return service.create(owner, 'Acme', '+02:00', session='setup')


@pytest.fixture
def add_member(db_adapter_factory, make_account, tenant):
    """Creates an account and adds it to the owner's team."""
    def _add_member(email: str, first_name: str = 'Member') -> Account:
        account = make_account(email, first_name)
        with UnitOfWork(db_adapter_factory()) as uow:
            TeamMemberRepository().add_member(uow, tenant.team.entity_id, account.entity_id)
        return account

    return _add_member
