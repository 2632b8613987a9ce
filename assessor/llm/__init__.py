"""LLM integration module using LangChain."""

__all__ = [
    "ProviderType",
]

from .provider import ProviderType
