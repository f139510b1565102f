from .message_quota import MessageQuotaOracle, MESSAGE_LIMIT_EXCEEDED
from .seats import check_seat_limit, SEAT_LIMIT_EXCEEDED
