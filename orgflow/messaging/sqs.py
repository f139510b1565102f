"""A connection to AWS SQS that allows sending and receiving messages to and from queues."""
import json
import logging
from typing import Callable
import boto3

from .base import JOB_ATTRIBUTE, MessageAdapter

logger = logging.getLogger(__name__)


class SqsConnection(MessageAdapter):
    """A connection to AWS SQS that allows sending and receiving messages to and from queues."""

    def __init__(self, aws_access_key_id: str = None,
                 aws_access_key_secret: str = None,
                 region_name: str = None,
                 exit_when_finished: bool = False):
        """Initializes a new SQS connection.

        Args:
            aws_access_key_id (str): The AWS access key ID.
            aws_access_key_secret (str): The AWS access key secret.
            region_name (str): The AWS region name.
            exit_when_finished (bool): Stop consuming once the queue is empty.
        """

        self._aws_access_key_id = aws_access_key_id
        self._aws_access_key_secret = aws_access_key_secret
        self._region_name = region_name
        self._exit_when_finished = exit_when_finished
        self._sqs = None
        self._queue_map = {}

    def __enter__(self):
        self._sqs = boto3.resource('sqs',
                                   aws_access_key_id=self._aws_access_key_id,
                                   aws_secret_access_key=self._aws_access_key_secret,
                                   region_name=self._region_name)
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self._sqs = None
        self._queue_map = {}

    def _get_queue(self, queue_name: str):
        if queue_name not in self._queue_map:
            self._queue_map[queue_name] = self._sqs.get_queue_by_name(QueueName=queue_name)
        return self._queue_map[queue_name]

    def send_message(self, queue_name: str, message: dict, routing_key: str = None):
        """Sends a message to the specified SQS queue.

        Args:
            queue_name (str): The name of the queue to send the message to.
            message (dict): The message to send.
            routing_key (str): Job type, sent as the ``job`` message attribute.
        """
        attributes = {}
        if routing_key:
            attributes[JOB_ATTRIBUTE] = {'DataType': 'String', 'StringValue': routing_key}
        self._get_queue(queue_name).send_message(
            MessageBody=json.dumps(message),
            MessageAttributes=attributes
        )

    def consume_messages(self, queue_name: str, callback_function: Callable[[dict], None] = None):
        """Consumes messages from the specified SQS queue.

        A message is deleted only after its callback succeeded; failed
        messages become visible again once their visibility timeout expires.

        Args:
            queue_name (str): The name of the queue to consume messages from.
            callback_function (callable): The function to call when a message is received.
        """
        logger.info("Connecting to SQS queue: %s...", queue_name)
        queue = self._get_queue(queue_name)

        while True:
            responses = queue.receive_messages(
                MessageAttributeNames=['All'],
                MaxNumberOfMessages=1,
                WaitTimeSeconds=20
            )
            if not responses:
                logger.info("No messages left in queue.")
                if self._exit_when_finished:
                    return
                continue

            response = responses[0]
            try:
                if callback_function is not None:
                    callback_function(json.loads(response.body))
            except Exception:  # pylint: disable=W0718
                logger.exception("Error processing message...")
                continue
            response.delete()
