from __future__ import annotations

import pydantic as p
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

from assessor.model import BaseModel, DeploymentEnvironment

from .base import BaseSecrets
from .source import YAMLSecretsSource


class PostgresqlSecrets(BaseModel):
    username: p.Secret[str] | None = None
    password: p.Secret[str] | None = None


class OpenAISecrets(BaseModel):
    """OpenAI API secrets."""

    secret_key: p.Secret[str]


class AnthropicSecrets(BaseModel):
    """Anthropic API secrets."""

    api_key: p.Secret[str]


class LLMSecrets(BaseModel):
    """LLM vendor API secrets."""

    openai: OpenAISecrets | None = None
    anthropic: AnthropicSecrets | None = None


class Secrets(BaseSecrets):
    """
    Credentials, read from `secrets.yaml` under the secrets root and from
    `ASSESSOR_`-prefixed environment variables, e.g.
    `ASSESSOR_LLM__OPENAI__SECRET_KEY`
    """

    model_config = SettingsConfigDict(env_prefix="ASSESSOR_", env_nested_delimiter="__", extra="ignore")

    root: p.AnyUrl
    env: DeploymentEnvironment

    llm: LLMSecrets = LLMSecrets()
    postgresql: PostgresqlSecrets = PostgresqlSecrets()

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return init_settings, env_settings, YAMLSecretsSource(settings_cls)
