from .config import BaseConfig, OrgflowConfig
