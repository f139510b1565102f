"""
Message quota checks against the analytical event store.
"""
import logging
from typing import Callable, Iterable, Optional

from orgflow.data.clickhouse import ClickHouseAdapter, ClickHouseTable
from orgflow.exceptions import QuotaExceededError

logger = logging.getLogger(__name__)

MESSAGE_LIMIT_EXCEEDED = 'Message limit has been exceeded'

COUNT_MESSAGES_QUERY = (
    f"SELECT count() AS count FROM {ClickHouseTable.MESSAGE_STATUS} "
    "WHERE workspace_id IN {workspace_ids:Array(String)}"
)


class MessageQuotaOracle:
    """
    Answers whether an organization may send more messages.

    The check is read-then-decide and not transactional with the send, so a
    small overage under concurrent sends is tolerated. Counts are never
    cached: each call opens its own connection and runs a fresh query.
    """

    def __init__(self, adapter_factory: Callable[[], ClickHouseAdapter]):
        self._adapter_factory = adapter_factory

    def count_messages(self, workspace_ids: Iterable[str]) -> int:
        with self._adapter_factory() as adapter:
            rows = adapter.query(COUNT_MESSAGES_QUERY, {'workspace_ids': list(workspace_ids)})
        return _parse_count(rows)

    def check_organization_message_limit(
        self,
        workspace_ids: Iterable[str],
        messages_to_send: int = 1,
        message_limit: int = None
    ) -> Optional[int]:
        """
        Checks the organization's message count against its plan limit.

        Args:
            workspace_ids: workspaces whose messages count towards the limit.
            messages_to_send: number of messages about to be sent.
            message_limit: the plan's message limit.

        Returns:
            The current message count, or None when there are no workspaces.

        Raises:
            QuotaExceededError: when ``count + messages_to_send > message_limit``.
        """
        workspace_ids = list(workspace_ids)
        if not workspace_ids:
            return None
        if message_limit is None:
            raise ValueError("message_limit is required")

        messages_count = self.count_messages(workspace_ids)
        if messages_count + messages_to_send > message_limit:
            logger.info("Message limit %s reached: %s sent, %s requested",
                        message_limit, messages_count, messages_to_send)
            raise QuotaExceededError(MESSAGE_LIMIT_EXCEEDED)
        return messages_count


def _parse_count(rows) -> int:
    if not rows:
        return 0
    row = rows[0]
    value = row.get('count', row.get('count()'))
    try:
        return int(value)
    except (TypeError, ValueError):
        logger.warning("Unexpected message count value %r, treating as 0", value)
        return 0
