import logging
import smtplib
from email.message import EmailMessage
from typing import Any

from .base import EmailService

logger = logging.getLogger(__name__)


class GmailService(EmailService):
    """Sends email through Gmail SMTP with an app password."""

    def __init__(self, host: str = 'smtp.gmail.com', port: int = 465, timeout: int = 15):
        self.host = host
        self.port = port
        self.timeout = timeout

    @staticmethod
    def build_message(message: dict) -> EmailMessage:
        email = EmailMessage()
        email['From'] = f"{message['from']} <{message['email']}>"
        email['To'] = message['to']
        email['Subject'] = message['subject']
        email.set_content(message.get('plainText') or '')
        if message.get('html'):
            email.add_alternative(message['html'], subtype='html')
        return email

    def send_email(self, message: dict) -> Any:
        email = self.build_message(message)
        with smtplib.SMTP_SSL(self.host, self.port, timeout=self.timeout) as smtp:
            smtp.login(message['email'], message['key'])
            result = smtp.send_message(email)
        logger.info("Sent email to %s via gmail", message['to'])
        return result
