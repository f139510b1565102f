from abc import ABC, abstractmethod
from typing import Any


class EmailService(ABC):
    """
        Base class for email service providers.

        Services are stateless: credentials travel in each email job.
    """

    @abstractmethod
    def send_email(self, message: dict) -> Any:
        """
        Sends an email job payload with keys ``key``, ``from``, ``email``,
        ``to``, ``subject``, ``plainText`` and ``html``.
        """
        raise NotImplementedError
