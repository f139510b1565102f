"""
Job queue contract shared by the RabbitMQ and SQS adapters.

A job is a JSON object. The producer names its type with ``routing_key``;
adapters carry it as the ``job`` header (RabbitMQ, also the message type)
or the ``job`` message attribute (SQS), so workers can dispatch without
decoding the body. The queue itself is always chosen by ``queue_name``.
"""
from abc import ABC, abstractmethod
from typing import Callable, Optional

JOB_ATTRIBUTE = 'job'

JobCallback = Callable[[dict], None]


class MessageAdapter(ABC):
    """A connection to a job queue, opened and closed as a context manager."""

    @abstractmethod
    def send_message(self, queue_name: str, message: dict, routing_key: Optional[str] = None):
        """
        Publishes one job and returns only after the broker accepted it.

        Args:
            queue_name (str): Queue the job is delivered to.
            message (dict): JSON serializable job body.
            routing_key (str): Job type, e.g. 'email'. Omitted jobs carry no type.

        Raises:
            Whatever the broker client raises when the job is not accepted.
        """

    @abstractmethod
    def consume_messages(self, queue_name: str, callback_function: Optional[JobCallback] = None):
        """
        Blocks delivering decoded jobs from ``queue_name`` to ``callback_function``.

        A job is acknowledged (or deleted) only after the callback returned.
        A callback that raises leaves the job unacknowledged for the broker
        to dead-letter or redeliver.
        """

    def serve(self, queue_name: str, processor: 'BaseServiceProcessor'):
        """Runs ``processor`` on every job consumed from ``queue_name``."""
        self.consume_messages(queue_name, processor.process)

    @abstractmethod
    def __enter__(self):
        """Opens the broker connection."""

    @abstractmethod
    def __exit__(self, exc_type, exc_value, traceback):
        """Closes the broker connection."""


class BaseServiceProcessor(ABC):  # pylint: disable=R0903
    """Worker-side handler for one job type."""

    @abstractmethod
    def process(self, message: dict):
        """
        Handles one decoded job. Raising marks the job as failed.
        """

    def __call__(self, message: dict):
        return self.process(message)
