from __future__ import annotations

import typing as t

import annotated_types as ant
import pydantic as p

from .base import BaseSettings


class WebSettings(BaseSettings):
    assessor: AssessorWebSettings


class ServeSettings(BaseSettings):
    host: p.IPvAnyAddress
    port: t.Annotated[int, ant.Gt(0), ant.Le(65535)]


class AssessorWebSettings(BaseSettings):
    """Settings for the evaluation API."""

    backend: ServeSettings
    frontend: ServeSettings | None = None
