from __future__ import annotations

import sys
import types
from pathlib import Path

import pydantic as p
from dependency_injector.containers import DeclarativeContainer
from dependency_injector.providers import Configuration, Container, Factory, Object, Provider, Resource, Singleton

import assessor
from assessor.llm.evaluation import EvaluationPipeline
from assessor.model import BaseModel, DeploymentEnvironment

from ..config import Secrets, Settings
from ..di import NotReady
from ..provider import LoggingProvider
from .llm import LLMContainer
from .storage import StorageContainer
from .template import TemplateContainer


class BootConfiguration(BaseModel):
    """Arguments to `AssessorContainer.boot`, passed to uvicorn workers through the environment."""

    debug: bool
    env: DeploymentEnvironment
    config_root: p.AnyUrl
    secrets_path: p.AnyUrl | None = None
    override: tuple[str, ...]


class AssessorContainer(DeclarativeContainer):
    config: Configuration = Configuration()
    secrets: Configuration = Configuration()

    debug: Provider[bool] = Singleton(bool)
    env: Provider[DeploymentEnvironment] = Singleton(DeploymentEnvironment)
    root: Object[NotReady | Path] = Object(NotReady())

    logging: Provider[LoggingProvider] = Resource(LoggingProvider, config=config.logging, debug=debug)
    storage: Provider[StorageContainer] = Container(
        StorageContainer, config=config.storage, secrets=secrets, logging=logging, root=root
    )
    template: Provider[TemplateContainer] = Container(TemplateContainer, config=config.template, root=root)
    llm: Provider[LLMContainer] = Container(LLMContainer, config=config.llm, secrets=secrets.llm)

    # a new pipeline per request, so overridden models take effect immediately
    evaluation: Provider[EvaluationPipeline] = Factory(
        EvaluationPipeline,
        grading_model=llm.grading_model,
        recommendation_model=llm.recommendation_model,
        env=template.llm,
    )

    _boot_config: Provider[BootConfiguration | NotReady] = Object(NotReady())

    @staticmethod
    def boot(
        ct: AssessorContainer,
        /,
        debug: bool,
        env: DeploymentEnvironment,
        config_root: p.AnyUrl,
        secrets_path: p.AnyUrl | None = None,
        override: tuple[str, ...] | None = None,
        wiring: tuple[str | types.ModuleType, ...] | None = None,
    ):
        """Load settings and secrets into the container and wire the package.

        Secrets are loaded last; the chat models read their API keys lazily, so
        a missing key fails only the request that grades or recommends.
        """
        if config_root.scheme != "file":
            raise ValueError(f"unsupported scheme for config root: {config_root.scheme}")
        ps = Settings(env=env, root=config_root, override=override or ())
        ct.config.from_pydantic(ps)

        ct.debug.override(debug)
        ct.env.override(env)
        ct.root.override(Path(assessor.__file__).resolve().parent.parent)

        if wiring:
            ct.wire(modules=wiring)
        if imported := [mod for name, mod in sys.modules.items() if name.startswith("assessor.")]:
            ct.wire(modules=imported)

        logger = ct.logging().get_logger()
        for ov in ps.override:
            k, v = ov.split("=", 1)
            logger.info("overriding configuration parameter", extra={"key": k, "value": v})

        ct.secrets.from_pydantic(Secrets(env=env, root=secrets_path or config_root))

        logger.debug(
            "assessor configured",
            extra={
                "env": env.value,
                "database": "sqlite" if ps.storage.persistent.sqlite else "postgresql",
                "grading_model": ps.llm.models.grading.model,
                "recommendation_model": ps.llm.models.recommendation.model,
            },
        )
        ct._boot_config.override(
            BootConfiguration(
                debug=debug, env=env, config_root=config_root, secrets_path=secrets_path, override=override or ()
            )
        )
