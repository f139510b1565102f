from .dispatcher import NotificationDispatcher, MESSAGE_QUEUE
