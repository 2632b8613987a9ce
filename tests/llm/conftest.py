"""Fixtures for LLM tests."""

from __future__ import annotations

import jinja2
import pytest

from assessor.core import AssessorContainer


@pytest.fixture(scope="session")
def llm_env(container: AssessorContainer) -> jinja2.Environment:
    """Provide the LLM Jinja2 environment from the DI container."""
    return container.template().llm()
