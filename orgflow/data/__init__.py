"""data module"""

from .base import DbAdapter, DuplicateKeyError
from .unit_of_work import UnitOfWork
import logging

logger = logging.getLogger(__name__)


# Conditional imports - only import if dependencies are available
try:
    from .postgresql import PostgreSQLAdapter
except ImportError:
    logger.info("PostgreSQLAdapter not loaded - probably, missing dependencies")

try:
    from .clickhouse import ClickHouseAdapter, ClickHouseTable
except ImportError:
    logger.info("ClickHouseAdapter not loaded - probably, missing dependencies")
