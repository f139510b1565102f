"""
A connection to a RabbitMQ message queue that allows to send and receive messages.
"""
import json
import logging
from typing import Callable
import pika

from .base import JOB_ATTRIBUTE, MessageAdapter

logger = logging.getLogger(__name__)


class RabbitMqConnection(MessageAdapter):
    """A connection to a RabbitMQ message queue that allows to send and receive messages."""

    def __init__(self, host: str, port: int, username: str, password: str, virtual_host: str = '/'):
        """
        Initializes a new RabbitMQ connection.

        Args:
            host (str): The host of the RabbitMQ server.
            port (int): The port of the RabbitMQ server.
            username (str): The username to use when connecting to the RabbitMQ server.
            password (str): The password to use when connecting to the RabbitMQ server.
            virtual_host (str): The virtual host to use when connecting to the RabbitMQ server.
        """
        self._host = host
        self._port = port
        self._username = username
        self._password = password
        self._virtual_host = virtual_host

        self._connection = None
        self._channel = None

    def __enter__(self):
        """
        Opens a connection to the RabbitMQ server with publisher confirms enabled.

        Returns:
            RabbitMqConnection: The connection to the RabbitMQ server.
        """
        self._connection = pika.BlockingConnection(
            pika.ConnectionParameters(host=self._host, port=self._port,
                                      credentials=pika.PlainCredentials(
                                          self._username,
                                          self._password
                                          ),
                                      virtual_host=self._virtual_host))
        self._channel = self._connection.channel()
        self._channel.confirm_delivery()

        return self

    def __exit__(self, exc_type, exc_value, traceback):
        """
        Closes the connection to the RabbitMQ server.
        """
        if self._connection is not None and self._connection.is_open:
            self._connection.close()
        self._connection = None
        self._channel = None

    def send_message(self, queue_name: str, message: dict, routing_key: str = None):
        """
        Publishes a persistent message to a durable queue.

        With publisher confirms on, ``basic_publish`` returns only after the
        broker has accepted the message and raises otherwise.

        Args:
            queue_name (str): The name of the queue to send the message to.
            message (dict): The message to send.
            routing_key (str): Job type, sent as the ``job`` header and message type.
        """
        self._channel.queue_declare(queue=queue_name, durable=True)
        properties = pika.BasicProperties(
            content_type='application/json',
            delivery_mode=pika.DeliveryMode.Persistent,
            type=routing_key,
            headers={JOB_ATTRIBUTE: routing_key} if routing_key else None
        )
        self._channel.basic_publish(
            exchange='',
            routing_key=queue_name,
            body=json.dumps(message),
            properties=properties,
            mandatory=True
        )

    def consume_messages(self, queue_name: str, callback_function: Callable[[dict], None] = None):
        """
        Consumes messages from the specified queue, acknowledging each one after the callback ran.

        A message whose callback raises is rejected without requeue so a
        poison message cannot block the queue.

        Args:
            queue_name (str): The name of the queue to consume messages from.
            callback_function (callable): The function to call when a message is received.
        """

        def _on_message(ch, method_frame, _header_frame, body):
            delivery_tag = method_frame.delivery_tag
            logger.info("Delivery tag: %s received", delivery_tag)
            try:
                if callback_function is not None:
                    callback_function(json.loads(body.decode()))
            except Exception:  # pylint: disable=W0718
                logger.exception("Error processing message %s", delivery_tag)
                ch.basic_nack(delivery_tag, requeue=False)
                return
            ch.basic_ack(delivery_tag)

        self._channel.queue_declare(queue=queue_name, durable=True)
        self._channel.basic_qos(prefetch_count=1)
        self._channel.basic_consume(queue=queue_name, on_message_callback=_on_message)

        try:
            logger.info('Listening to RabbitMQ queue %s on %s:%s...', queue_name, self._host, self._port)
            self._channel.start_consuming()
        except KeyboardInterrupt:
            logger.info("Exiting gracefully...")
            self._channel.stop_consuming()
