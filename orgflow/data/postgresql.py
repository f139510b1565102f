import json
import logging
import psycopg2
import psycopg2.errors
from uuid import UUID
from typing import Any, Dict, List, Tuple, Optional, Callable

from orgflow.data.base import DbAdapter, DuplicateKeyError

logger = logging.getLogger(__name__)


class PostgreSQLAdapter(DbAdapter):
    """PostgreSQL adapter for interacting with PostgreSQL."""

    def __init__(self, host: str, port: int, user: str, password: str, database: str,
                 connection_resolver: Optional[Callable] = None, connection_closer: Optional[Callable] = None):
        self._host = host
        self._port = port
        self._user = user
        self._password = password
        self._database = database
        self._connection = None
        self._cursor = None
        self._in_transaction = False

        if connection_resolver is None:
            self._connection_resolver = psycopg2.connect
        else:
            self._connection_resolver = connection_resolver

        self._connection_closer = connection_closer

    def __enter__(self):
        """Context manager entry point for creating DB connection."""
        self._connection = self.connect
        self._cursor = self._connection.cursor()

        return self

    def __exit__(self, exc_type, exc_value, traceback):
        """Context manager exit point for closing DB connection."""
        self.close_connection()

    def close_connection(self):
        """Closes the connection and cursor."""
        self._in_transaction = False

        if self._connection_closer:
            self._connection_closer(self)
        else:
            if self._cursor is not None:
                self._cursor.close()
                self._cursor = None

            if self._connection is not None:
                self._connection.close()
                self._connection = None

    @property
    def connect(self):
        return self._connection_resolver(
            host=self._host,
            port=self._port,
            user=self._user,
            password=self._password,
            database=self._database
        )

    @property
    def in_transaction(self) -> bool:
        return self._in_transaction

    def begin(self):
        # psycopg2 opens the transaction implicitly on the first statement.
        self._in_transaction = True

    def commit(self):
        self._connection.commit()
        self._in_transaction = False

    def rollback(self):
        if self._connection is not None:
            self._connection.rollback()
        self._in_transaction = False

    def _call_cursor(self, function_name, *args, **kwargs):
        """Calls a function specified by function_name argument in PostgreSQL Cursor passing forward args and kwargs."""
        if not self._cursor:
            raise Exception("No cursor is available.")
        return getattr(self._cursor, function_name)(*args, **kwargs)

    def _build_condition_string(self, table, key, value):
        if '.' not in key:
            key = f"{table}.{key}"

        if isinstance(value, (str, bool, int, float)):
            return f"{key} = %s", [value]
        elif isinstance(value, (list, tuple, set)):
            if not value:
                return "FALSE", []
            placeholders = ', '.join(['%s'] * len(value))
            return f"{key} IN ({placeholders})", [str(v) if isinstance(v, UUID) else v for v in value]
        elif isinstance(value, UUID):
            return f"{key} = %s", [value.hex]
        elif value is None:
            return f"{key} IS NULL", []
        else:
            raise Exception(
                f"Unsupported type {type(value)} for condition key: {key}, value: {value}")

    def _build_where(self, table, conditions) -> Tuple[str, List[Any]]:
        if not conditions:
            return "", []
        condition_strs_values = [self._build_condition_string(table, k, v) for k, v in conditions.items()]
        values = sum((condition_value for _, condition_value in condition_strs_values), [])
        return f" WHERE {' AND '.join(condition_str for condition_str, _ in condition_strs_values)}", values

    @staticmethod
    def _transform_value(value):
        if isinstance(value, dict):
            return json.dumps(value)
        if isinstance(value, UUID):
            return value.hex
        return value

    def _execute(self, sql, values, table: str = None):
        try:
            self._call_cursor('execute', sql, values)
        except psycopg2.errors.UniqueViolation as ex:
            self._rollback_if_autocommit()
            raise DuplicateKeyError(table, getattr(ex.diag, 'constraint_name', None)) from ex
        except psycopg2.Error as ex:
            self._rollback_if_autocommit()
            logger.error("Error in SQL:\n%s", ex)
            raise

    def _rollback_if_autocommit(self):
        if not self._in_transaction:
            self._connection.rollback()

    def _commit_if_autocommit(self):
        if not self._in_transaction:
            self._connection.commit()

    def execute_query(self, sql, _vars=None, table: str = None):
        """Executes a query against the DB and returns result rows as dicts when there are any."""
        if _vars is None:
            _vars = ()

        self._execute(sql, _vars, table=table)

        rows = None
        if self._cursor.description is not None:
            column_names = [desc[0] for desc in self._cursor.description]
            rows = [dict(zip(column_names, row)) for row in self._call_cursor('fetchall')]

        self._commit_if_autocommit()
        return rows

    def get_one(
            self,
            table: str,
            conditions: Dict[str, Any],
            sort: List[Tuple[str, str]] = None,
            for_update: bool = False
    ) -> Optional[Dict[str, Any]]:
        where_sql, values = self._build_where(table, conditions)
        query = f"SELECT {table}.* FROM {table}{where_sql}"
        if sort:
            query += f" ORDER BY {', '.join(f'{column} {direction}' for column, direction in sort)}"
        query += " LIMIT 1"
        if for_update:
            query += " FOR UPDATE"

        rows = self.execute_query(query, tuple(values))
        if not rows:
            return None
        return rows[0]

    def get_many(
            self,
            table: str,
            conditions: Dict[str, Any] = None,
            sort: List[Tuple[str, str]] = None,
            limit: int = None,
            offset: int = None
    ) -> List[Dict[str, Any]]:
        where_sql, values = self._build_where(table, conditions)
        query = f"SELECT {table}.* FROM {table}{where_sql}"
        if sort:
            query += f" ORDER BY {', '.join(f'{column} {direction}' for column, direction in sort)}"
        if limit is not None:
            query += f" LIMIT {int(limit)}"
        if offset is not None:
            query += f" OFFSET {int(offset)}"

        return self.execute_query(query, tuple(values)) or []

    def get_count(self, table: str, conditions: Dict[str, Any]) -> int:
        """Count rows in `table` matching `conditions`."""
        where_sql, values = self._build_where(table, conditions)
        rows = self.execute_query(f"SELECT COUNT(*) AS count FROM {table}{where_sql}", tuple(values))
        if rows:
            return int(rows[0].get('count', 0) or 0)
        return 0

    def insert(self, table: str, data: Dict[str, Any]) -> Dict[str, Any]:
        columns = ', '.join(data.keys())
        placeholders = ', '.join(['%s'] * len(data))
        values = tuple(self._transform_value(v) for v in data.values())
        self.execute_query(f"INSERT INTO {table} ({columns}) VALUES ({placeholders})", values, table=table)
        return data

    def update(self, table: str, conditions: Dict[str, Any], values: Dict[str, Any]) -> int:
        if not conditions:
            raise ValueError(f"Refusing to update every row of {table}")
        set_sql = ', '.join(f"{column} = %s" for column in values.keys())
        where_sql, where_values = self._build_where(table, conditions)
        params = tuple(self._transform_value(v) for v in values.values()) + tuple(where_values)
        self.execute_query(f"UPDATE {table} SET {set_sql}{where_sql}", params, table=table)
        return self._cursor.rowcount

    def delete(self, table: str, conditions: Dict[str, Any]) -> int:
        if not conditions:
            raise ValueError(f"Refusing to delete every row of {table}")
        where_sql, values = self._build_where(table, conditions)
        self.execute_query(f"DELETE FROM {table}{where_sql}", tuple(values))
        return self._cursor.rowcount
