"""
Tests for PostgreSQLAdapter SQL generation and transaction handling.

The connection is injected through ``connection_resolver`` so no database
is needed.
"""
import json
import unittest
from unittest.mock import MagicMock
from uuid import UUID

import psycopg2.errors

from orgflow.data.base import DuplicateKeyError
from orgflow.data.postgresql import PostgreSQLAdapter


class PostgreSQLAdapterTestCase(unittest.TestCase):

    def setUp(self):
        self.connection = MagicMock()
        self.cursor = self.connection.cursor.return_value
        self.cursor.description = None
        self.resolver = MagicMock(return_value=self.connection)
        self.adapter = PostgreSQLAdapter('localhost', 5432, 'user', 'secret', 'orgflow',
                                         connection_resolver=self.resolver)

    def executed(self):
        return self.cursor.execute.call_args.args


class TestConnection(PostgreSQLAdapterTestCase):

    def test_enter_resolves_connection(self):
        with self.adapter:
            self.resolver.assert_called_once_with(
                host='localhost', port=5432, user='user', password='secret', database='orgflow')

        self.cursor.close.assert_called_once_with()
        self.connection.close.assert_called_once_with()

    def test_connection_closer_overrides_close(self):
        closer = MagicMock()
        adapter = PostgreSQLAdapter('localhost', 5432, 'user', 'secret', 'orgflow',
                                    connection_resolver=self.resolver, connection_closer=closer)
        with adapter:
            pass

        closer.assert_called_once_with(adapter)
        self.connection.close.assert_not_called()


class TestQueries(PostgreSQLAdapterTestCase):

    def test_get_one_with_lock(self):
        """
        Test that ``for_update`` appends a row lock after the limit.
        """
        self.cursor.description = [('entity_id',), ('email',)]
        self.cursor.fetchall.return_value = [('a1', 'x@example.com')]

        with self.adapter:
            row = self.adapter.get_one('account', {'entity_id': 'a1'}, for_update=True)

        sql, values = self.executed()
        self.assertEqual(sql, "SELECT account.* FROM account WHERE account.entity_id = %s LIMIT 1 FOR UPDATE")
        self.assertEqual(values, ('a1',))
        self.assertEqual(row, {'entity_id': 'a1', 'email': 'x@example.com'})

    def test_get_many_with_in_sort_limit_offset(self):
        self.cursor.description = [('entity_id',)]
        self.cursor.fetchall.return_value = []

        with self.adapter:
            rows = self.adapter.get_many('account', {'entity_id': ['a', 'b']},
                                         sort=[('account_created_at', 'DESC')], limit=10, offset=20)

        sql, values = self.executed()
        self.assertEqual(
            sql,
            "SELECT account.* FROM account WHERE account.entity_id IN (%s, %s) "
            "ORDER BY account_created_at DESC LIMIT 10 OFFSET 20"
        )
        self.assertEqual(values, ('a', 'b'))
        self.assertEqual(rows, [])

    def test_empty_in_list_matches_nothing(self):
        self.cursor.description = [('count',)]
        self.cursor.fetchall.return_value = [(0,)]

        with self.adapter:
            count = self.adapter.get_count('account', {'entity_id': []})

        sql, _ = self.executed()
        self.assertEqual(sql, "SELECT COUNT(*) AS count FROM account WHERE FALSE")
        self.assertEqual(count, 0)

    def test_insert_serializes_dicts_and_uuids(self):
        uuid = UUID('12345678123456781234567812345678')

        with self.adapter:
            self.adapter.insert('workspace', {'entity_id': uuid, 'push_platforms': {'iOS': None}})

        sql, values = self.executed()
        self.assertEqual(sql, "INSERT INTO workspace (entity_id, push_platforms) VALUES (%s, %s)")
        self.assertEqual(values, (uuid.hex, json.dumps({'iOS': None})))

    def test_update_and_delete_return_rowcount(self):
        self.cursor.rowcount = 1

        with self.adapter:
            updated = self.adapter.update('organization', {'entity_id': 'o1'}, {'owner_id': 'a2'})
            update_sql = self.executed()[0]
            deleted = self.adapter.delete('account', {'entity_id': 'a1'})
            delete_sql = self.executed()[0]

        self.assertEqual(update_sql, "UPDATE organization SET owner_id = %s WHERE organization.entity_id = %s")
        self.assertEqual(delete_sql, "DELETE FROM account WHERE account.entity_id = %s")
        self.assertEqual((updated, deleted), (1, 1))

    def test_unconditional_writes_are_refused(self):
        with self.adapter:
            with self.assertRaises(ValueError):
                self.adapter.update('account', {}, {'email': 'x'})
            with self.assertRaises(ValueError):
                self.adapter.delete('account', {})


class TestTransactions(PostgreSQLAdapterTestCase):

    def test_statements_autocommit_outside_transaction(self):
        with self.adapter:
            self.adapter.delete('account', {'entity_id': 'a1'})

        self.connection.commit.assert_called_once_with()

    def test_statements_wait_for_commit_inside_transaction(self):
        """
        Test that writes after ``begin`` are committed only by ``commit``.
        """
        with self.adapter:
            self.adapter.begin()
            self.adapter.delete('account', {'entity_id': 'a1'})
            self.adapter.delete('team_member', {'account_id': 'a1'})
            self.connection.commit.assert_not_called()
            self.adapter.commit()

        self.connection.commit.assert_called_once_with()
        self.assertFalse(self.adapter.in_transaction)

    def test_rollback(self):
        with self.adapter:
            self.adapter.begin()
            self.adapter.rollback()

        self.connection.rollback.assert_called_once_with()

    def test_unique_violation_raises_duplicate_key(self):
        violation = psycopg2.errors.UniqueViolation()
        self.cursor.execute.side_effect = violation

        with self.adapter:
            self.adapter.begin()
            with self.assertRaises(DuplicateKeyError) as ctx:
                self.adapter.insert('organization_invite', {'entity_id': 'i1', 'email': 'x@example.com'})

        self.assertEqual(ctx.exception.table, 'organization_invite')
        self.assertIs(ctx.exception.__cause__, violation)
        self.connection.rollback.assert_not_called()


if __name__ == '__main__':
    unittest.main()
