"""Injection markers for route handlers, CLI commands and storage functions.

Modules are wired by `AssessorContainer.boot` (everything under `assessor`
already imported) and by the entry points, which wire the modules they load
after boot.
"""

from __future__ import annotations

__all__ = [
    "Manage",
    "NotReady",
    "Provide",
    "as_",
    "inject",
]

import functools
import typing as t

import dependency_injector.wiring as wiring
from dependency_injector.containers import Container
from dependency_injector.providers import Provider
from dependency_injector.wiring import ClassGetItemMeta, Closing, Provide, TypeModifier

P = t.ParamSpec("P")
TReturn = t.TypeVar("TReturn")
TAs = t.TypeVar("TAs")
T = t.TypeVar("T")

WebPackage = "assessor.web"


def inject(fn: t.Callable[P, TReturn]) -> t.Callable[P, TReturn]:
    reference_injections, reference_closing = wiring._fetch_reference_injections(fn)  # pyright: ignore [reportPrivateUsage] noqa: E501
    patched = wiring._get_patched(fn, reference_injections, reference_closing)  # pyright: ignore [reportPrivateUsage] noqa: E501

    # route handlers keep their module globals so FastAPI can resolve the
    # pydantic forward refs (EvaluateRequest, Session) in their signatures
    if fn.__module__.startswith(WebPackage) and hasattr(fn, "__globals__"):
        return functools.wraps(fn, updated=("__globals__",))(patched)
    return patched


class Manage(object, metaclass=ClassGetItemMeta):
    """Provide a resource, e.g. a database session, and close it once the injected call returns."""

    def __new__(cls, provider: Provider[T] | Container | str):
        return Closing[Provide[provider]]

    @classmethod
    def __class_getitem__(cls, item: Provider[T] | Container | str):
        return cls(item)


def as_(type_: type[TAs]) -> TypeModifier:
    """Validate an injected configuration section into a settings model."""
    return TypeModifier(type_)


class NotReady(object):
    """Placeholder for container values which are only known after boot, such as the package root."""

    _instance: t.ClassVar[NotReady | None] = None

    def __new__(cls) -> NotReady:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self):
        return "<NotReady>"
