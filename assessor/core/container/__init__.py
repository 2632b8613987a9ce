__all__ = [
    "AssessorContainer",
    "BootConfiguration",
    "LLMContainer",
    "StorageContainer",
    "TemplateContainer",
]

from .assessor import AssessorContainer, BootConfiguration
from .llm import LLMContainer
from .storage import StorageContainer
from .template import TemplateContainer
