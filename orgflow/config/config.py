"""
Config classes that read the process environment, optionally seeded from a .env file.
"""
import os
from abc import abstractmethod
from typing import List, Optional
import logging
from dotenv import load_dotenv

from orgflow.emailing.config import EmailConfig

logger = logging.getLogger(__name__)


class BaseConfig():
    """
    Config class that snapshots the environment, after loading a .env file if present.
    """
    def __init__(self, dotenv_path: Optional[str] = None):
        load_dotenv(dotenv_path)
        self.env_vars = {key: os.getenv(key) for key in os.environ}

    def get_env_var(self, var_name: str, default=None):
        """
        Retrieve the value of the specified environment variable
        Args:
            var_name (str) : Name of the env var to fetch
            default : Value returned when the variable is not set
        """
        if var_name in self.env_vars:
            return self.env_vars[var_name]
        if default is None:
            logger.warning("Variable %s not found.", var_name)
        return default

    def get_var_as_list(self, var_name: str) -> Optional[List[str]]:
        """
        Returns a comma-delimited var as list
        """
        if var_name in self.env_vars:
            return [env_var.strip() for env_var in self.env_vars[var_name].split(",") if env_var.strip()]
        logger.warning("Warning: var %s not found.", var_name)
        return None

    @abstractmethod
    def validate_env_vars(self):
        """
        Abstract method for validation of the env vars.
        """


class OrgflowConfig(BaseConfig):
    """
    Settings for the organization workflows.

    Read once at startup; components receive the values they need at
    construction instead of reading the environment per call.
    """
    REQUIRED_VARS = ['FRONTEND_URL']

    def __init__(self, dotenv_path: Optional[str] = None):
        super().__init__(dotenv_path)
        self.validate_env_vars()

    def validate_env_vars(self):
        missing = [name for name in self.REQUIRED_VARS if not self.env_vars.get(name)]
        if missing:
            raise ValueError(f"Missing required environment variables: {', '.join(missing)}")

    @property
    def frontend_url(self) -> str:
        return self.env_vars['FRONTEND_URL'].rstrip('/')

    @property
    def message_queue_name(self) -> str:
        return self.get_env_var('MESSAGE_QUEUE_NAME', 'message')

    def get_email_config(self) -> EmailConfig:
        """Builds the email provider configuration from the snapshotted environment."""
        return EmailConfig(**{key: value for key, value in self.env_vars.items()
                              if key in EmailConfig.model_fields})
