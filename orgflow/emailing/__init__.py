from .config import EmailConfig
from .base import EmailService
from .gmail import GmailService
from .mailgun import MailgunService
from .factory import EmailServiceFactory, email_factory
from .enums import EmailProvider
from .processor import EmailJobProcessor, EMAIL_JOB


__all__ = [
    'EmailConfig',
    'EmailService',
    'GmailService',
    'MailgunService',
    'EmailServiceFactory',
    'email_factory',
    'EmailProvider',
    'EmailJobProcessor',
    'EMAIL_JOB',
]
