from typing import Dict

from .enums import EmailProvider
from .base import EmailService
from .gmail import GmailService
from .mailgun import MailgunService


class EmailServiceFactory:
    def __init__(self):
        self._services: Dict[EmailProvider, EmailService] = {}

    def register_service(self, key: EmailProvider, service: EmailService):
        self._services[key] = service

    def get(self, provider) -> EmailService:
        key = EmailProvider(provider).resolved
        service = self._services.get(key)
        if service is None:
            raise ValueError(f"No email service registered for provider {key}")
        return service


email_factory = EmailServiceFactory()

email_factory.register_service(key=EmailProvider.gmail, service=GmailService())
email_factory.register_service(key=EmailProvider.mailgun, service=MailgunService())
