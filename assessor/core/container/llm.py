"""LLM container for dependency injection."""

from __future__ import annotations

import pydantic as p
from dependency_injector.containers import DeclarativeContainer
from dependency_injector.providers import Configuration, Provider, Singleton
from langchain_core.language_models import BaseChatModel

from assessor.llm import ProviderType

from ..config.llm import ModelSettings
from ..config.secrets import LLMSecrets


def create_chat_model(
    config: ModelSettings,
    *,
    openai_api_key: p.Secret[str] | None = None,
    anthropic_api_key: p.Secret[str] | None = None,
) -> BaseChatModel:
    """Create a LangChain chat model from configuration.

    Args:
        config: Model configuration
        openai_api_key: OpenAI API key (required for OpenAI models)
        anthropic_api_key: Anthropic API key (required for Anthropic models)

    Returns:
        Configured LangChain chat model
    """
    if config.provider == ProviderType.OpenAI:
        from langchain_openai import ChatOpenAI

        if openai_api_key is None:
            raise ValueError("OpenAI API key required for OpenAI provider")

        return ChatOpenAI(
            model=config.model,
            temperature=config.temperature,
            max_completion_tokens=config.max_tokens,
            timeout=config.timeout_seconds,
            max_retries=config.max_retries,
            api_key=p.SecretStr(openai_api_key.get_secret_value()),
        )
    elif config.provider == ProviderType.Anthropic:
        from langchain_anthropic import ChatAnthropic

        if anthropic_api_key is None:
            raise ValueError("Anthropic API key required for Anthropic provider")

        return ChatAnthropic(
            model_name=config.model,
            temperature=config.temperature,
            max_tokens_to_sample=config.max_tokens,
            timeout=config.timeout_seconds,
            max_retries=config.max_retries,
            api_key=p.SecretStr(anthropic_api_key.get_secret_value()),
            stop=None,
        )
    else:
        raise ValueError(f"Unsupported provider: {config.provider}")


def create_model(settings: ModelSettings, secrets: LLMSecrets) -> BaseChatModel:
    """Create a chat model from settings, picking the key for its provider."""
    return create_chat_model(
        settings,
        openai_api_key=secrets.openai.secret_key if secrets.openai else None,
        anthropic_api_key=secrets.anthropic.api_key if secrets.anthropic else None,
    )


class LLMContainer(DeclarativeContainer):
    """Container for the evaluation chat models.

    Models are built lazily so that a missing API key only fails the
    request which needs the model.
    """

    config: Configuration = Configuration()
    secrets: Configuration = Configuration()

    llm_secrets: Provider[LLMSecrets] = Singleton(LLMSecrets.model_validate, secrets)

    grading_model: Provider[BaseChatModel] = Singleton(
        create_model, settings=config.models.grading.as_(ModelSettings), secrets=llm_secrets
    )

    recommendation_model: Provider[BaseChatModel] = Singleton(
        create_model, settings=config.models.recommendation.as_(ModelSettings), secrets=llm_secrets
    )
