"""LLM configuration settings."""

from __future__ import annotations

from assessor.llm.provider import ProviderType

from .base import BaseSettings


class ModelSettings(BaseSettings):
    """Settings for a specific model."""

    provider: ProviderType = ProviderType.OpenAI
    model: str = "gpt-4o-mini"
    max_tokens: int = 1024
    temperature: float = 0.3
    # calls are not retried, failures degrade to fallback results instead
    max_retries: int = 0
    timeout_seconds: float = 30.0


class EvaluationModels(BaseSettings):
    """Model configuration for the evaluation tasks."""

    # grades free-text answers, one call per answer
    grading: ModelSettings = ModelSettings(max_tokens=200, temperature=0.3)

    # writes the improvement recommendation, one call per request
    recommendation: ModelSettings = ModelSettings(max_tokens=2048, temperature=0.7)


class LLMSettings(BaseSettings):
    """Root LLM configuration."""

    models: EvaluationModels = EvaluationModels()
