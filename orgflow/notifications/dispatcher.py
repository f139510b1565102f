"""
Notification dispatcher: turns workflow events into queued email jobs.
"""
import logging
from typing import Callable

from orgflow.emailing.config import EmailConfig
from orgflow.emailing.enums import EmailProvider
from orgflow.emailing.processor import EMAIL_JOB
from orgflow.messaging.base import MessageAdapter

logger = logging.getLogger(__name__)

MESSAGE_QUEUE = 'message'


class NotificationDispatcher:
    """
    Enqueues outbound email jobs.

    Callers invoke it only after their transaction has committed. Enqueueing
    returns once the queue accepted the job; delivery is at-least-once and
    happens in the email worker.
    """

    def __init__(
        self,
        message_adapter_factory: Callable[[], MessageAdapter],
        email_config: EmailConfig,
        queue_name: str = MESSAGE_QUEUE
    ):
        self._message_adapter_factory = message_adapter_factory
        self.email_config = email_config
        self.queue_name = queue_name

    def _provider_fields(self) -> dict:
        config = self.email_config
        if config.provider is EmailProvider.gmail:
            return {
                'provider': EmailProvider.gmail.value,
                'key': config.GMAIL_APP_CRED,
                'from': config.EMAIL_SENDER_NAME,
                'email': config.GMAIL_VERIFICATION_EMAIL,
            }
        return {
            'provider': EmailProvider.mailgun.value,
            'key': config.MAILGUN_API_KEY,
            'from': config.EMAIL_SENDER_NAME,
            'domain': config.MAILGUN_DOMAIN,
            'email': config.MAILGUN_SENDER,
        }

    def build_invite_email(self, to: str, organization_name: str, invite_link: str) -> dict:
        """Builds the email job for an organization invite using the configured provider profile."""
        payload = self._provider_fields()
        payload.update({
            'to': to,
            'subject': f"You have been invited to organization: {organization_name}",
            'plainText': f"Paste the following link into your browser: {invite_link}",
            'html': f'Paste the following link into your browser: <a href="{invite_link}">{invite_link}</a>',
        })
        return payload

    def enqueue(self, payload: dict, routing_key: str = EMAIL_JOB):
        """Sends one job to the queue on a connection opened for this call."""
        with self._message_adapter_factory() as message_adapter:
            message_adapter.send_message(self.queue_name, payload, routing_key=routing_key)
        logger.info("Enqueued %s job for %s on %s", routing_key, payload.get('to'), self.queue_name)

    def send_invite(self, to: str, organization_name: str, invite_link: str):
        self.enqueue(self.build_invite_email(to, organization_name, invite_link))
