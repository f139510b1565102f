"""
Tests for the job queue contract: abstract adapters and processors, and
serving a processor from a queue.
"""
import json
import unittest
from unittest.mock import MagicMock, patch

from orgflow.emailing.processor import EmailJobProcessor
from orgflow.messaging.base import JOB_ATTRIBUTE, BaseServiceProcessor, MessageAdapter
from orgflow.messaging.rabbitmq import RabbitMqConnection


class ListAdapter(MessageAdapter):
    """Delivers a fixed list of jobs and stops."""

    def __init__(self, jobs):
        self.jobs = jobs
        self.consumed_from = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        pass

    def send_message(self, queue_name, message, routing_key=None):
        self.jobs.append(message)

    def consume_messages(self, queue_name, callback_function=None):
        self.consumed_from = queue_name
        for job in self.jobs:
            callback_function(job)


class RecordingProcessor(BaseServiceProcessor):

    def __init__(self):
        self.processed = []

    def process(self, message):
        self.processed.append(message)


class TestContract(unittest.TestCase):

    def test_adapter_and_processor_are_abstract(self):
        with self.assertRaises(TypeError):
            MessageAdapter()  # pylint: disable=abstract-class-instantiated
        with self.assertRaises(TypeError):
            BaseServiceProcessor()  # pylint: disable=abstract-class-instantiated

    def test_email_worker_is_a_service_processor(self):
        self.assertIsInstance(EmailJobProcessor(), BaseServiceProcessor)

    def test_job_attribute_name(self):
        self.assertEqual(JOB_ATTRIBUTE, 'job')

    def test_calling_a_processor_runs_process(self):
        processor = RecordingProcessor()

        processor({'to': 'new@example.com'})

        self.assertEqual(processor.processed, [{'to': 'new@example.com'}])


class TestServe(unittest.TestCase):

    def test_serve_hands_every_job_to_the_processor(self):
        jobs = [{'to': 'a@example.com'}, {'to': 'b@example.com'}]
        processor = RecordingProcessor()

        with ListAdapter(list(jobs)) as adapter:
            adapter.serve('message', processor)

        self.assertEqual(adapter.consumed_from, 'message')
        self.assertEqual(processor.processed, jobs)

    @patch('orgflow.messaging.rabbitmq.pika.BlockingConnection')
    def test_rabbitmq_serve_decodes_and_acks_after_processing(self, mock_blocking_connection):
        """
        Test that a served RabbitMQ job reaches the processor as a dict and is
        acknowledged afterwards.
        """
        mock_channel = MagicMock()
        mock_blocking_connection.return_value.channel.return_value = mock_channel
        processor = RecordingProcessor()

        with RabbitMqConnection('localhost', 5672, 'user', 'password') as connection:
            connection.serve('message', processor)

        on_message = mock_channel.basic_consume.call_args.kwargs['on_message_callback']
        on_message(mock_channel, MagicMock(delivery_tag=7), MagicMock(),
                   json.dumps({'to': 'new@example.com'}).encode())

        self.assertEqual(processor.processed, [{'to': 'new@example.com'}])
        mock_channel.basic_ack.assert_called_once_with(7)
        mock_channel.basic_nack.assert_not_called()


if __name__ == '__main__':
    unittest.main()
