"""Email provider configuration"""
from typing import Optional

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .enums import EmailProvider


class EmailConfig(BaseSettings):
    """
    Provider selection and per-provider credentials.

    Built once (from the environment or explicit keyword arguments) and
    injected into the notification dispatcher.
    """
    model_config = SettingsConfigDict(extra='ignore')

    EMAIL_PROVIDER: EmailProvider = EmailProvider.default
    EMAIL_SENDER_NAME: str = 'Orgflow'

    GMAIL_APP_CRED: Optional[str] = None
    GMAIL_VERIFICATION_EMAIL: Optional[str] = None

    MAILGUN_API_KEY: Optional[str] = None
    MAILGUN_DOMAIN: Optional[str] = None
    MAILGUN_SENDER: str = 'noreply'

    @model_validator(mode='after')
    def check_provider_credentials(self) -> 'EmailConfig':
        if self.provider is EmailProvider.gmail:
            required = ('GMAIL_APP_CRED', 'GMAIL_VERIFICATION_EMAIL')
        else:
            required = ('MAILGUN_API_KEY', 'MAILGUN_DOMAIN')
        missing = [name for name in required if not getattr(self, name)]
        if missing:
            raise ValueError(f"Missing {', '.join(missing)} for email provider {self.provider}")
        return self

    @property
    def provider(self) -> EmailProvider:
        return self.EMAIL_PROVIDER.resolved
