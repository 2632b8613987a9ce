__all__ = [
    "AssessorContainer",
    "BootConfiguration",
    "di",
    "LoggingProvider",
    "Settings",
    "Secrets",
]


from . import di
from .config import Secrets, Settings
from .container import AssessorContainer, BootConfiguration
from .provider import LoggingProvider
