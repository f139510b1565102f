"""Worker side of the email queue."""
import logging

from orgflow.messaging.base import BaseServiceProcessor

from .factory import EmailServiceFactory, email_factory

logger = logging.getLogger(__name__)

EMAIL_JOB = 'email'


class EmailJobProcessor(BaseServiceProcessor):
    """Sends queued email jobs through the provider named in each job."""

    def __init__(self, factory: EmailServiceFactory = None):
        super().__init__()
        self.factory = factory or email_factory

    def process(self, message: dict):
        provider = message.get('provider')
        if not provider:
            raise ValueError("Email job has no provider")
        service = self.factory.get(provider)
        logger.info("Sending %s job to %s with %s", EMAIL_JOB, message.get('to'), provider)
        return service.send_email(message)
