"""Module for messaging"""
from .base import JOB_ATTRIBUTE, MessageAdapter, BaseServiceProcessor
from .rabbitmq import RabbitMqConnection
from .sqs import SqsConnection
