"""Email provider enum"""
from enum import Enum


class EmailProvider(str, Enum):
    """Email provider enum"""
    gmail = 'gmail'
    mailgun = 'mailgun'
    default = 'default'

    @property
    def resolved(self) -> 'EmailProvider':
        """The concrete provider; ``default`` means mailgun."""
        return EmailProvider.mailgun if self is EmailProvider.default else self

    def __str__(self):
        return str(self.value)
