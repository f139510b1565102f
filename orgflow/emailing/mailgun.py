import logging
from typing import Any

import requests

from .base import EmailService

logger = logging.getLogger(__name__)


class MailgunService(EmailService):
    """Sends email through the Mailgun messages API."""

    def __init__(self, base_url: str = 'https://api.mailgun.net', timeout: int = 15):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout

    def send_email(self, message: dict) -> Any:
        domain = message['domain']
        data = {
            'from': f"{message['from']} <{message['email']}@{domain}>",
            'to': message['to'],
            'subject': message['subject'],
            'text': message.get('plainText') or '',
        }
        if message.get('html'):
            data['html'] = message['html']

        response = requests.post(
            f"{self.base_url}/v3/{domain}/messages",
            auth=('api', message['key']),
            data=data,
            timeout=self.timeout
        )
        response.raise_for_status()
        logger.info("Sent email to %s via mailgun", message['to'])
        return response.json()
