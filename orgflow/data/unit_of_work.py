"""
Scoped transactions over a DbAdapter.
"""
import logging

from orgflow.data.base import DbAdapter

logger = logging.getLogger(__name__)


class UnitOfWork:
    """
    One transaction on one connection.

    Entering opens the adapter's connection and begins a transaction. Leaving
    commits when the block finished normally and rolls back on any exception,
    including ``KeyboardInterrupt`` and other cancellations. The connection is
    released on every exit path.

    Every repository call made during a workflow receives the same
    ``UnitOfWork`` so that all of its writes commit or roll back together.
    """

    def __init__(self, adapter: DbAdapter):
        self.adapter = adapter
        self._active = False

    @property
    def active(self) -> bool:
        return self._active

    def __enter__(self) -> 'UnitOfWork':
        self.adapter.__enter__()
        try:
            self.adapter.begin()
        except BaseException:
            self.adapter.__exit__(None, None, None)
            raise
        self._active = True
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        try:
            if exc_type is None:
                self._commit()
            else:
                self._rollback()
        finally:
            self._active = False
            self.adapter.__exit__(exc_type, exc_value, traceback)
        return False

    def _commit(self):
        try:
            self.adapter.commit()
        except BaseException:
            self._rollback()
            raise

    def _rollback(self):
        try:
            self.adapter.rollback()
        except Exception:  # pylint: disable=W0718
            # the triggering exception still propagates
            logger.exception("Rollback failed")
