import pathlib

import jinja2
from dependency_injector.containers import DeclarativeContainer
from dependency_injector.providers import Configuration, Object, Provider, ThreadSafeSingleton

import assessor.lib.json

from ..di import NotReady


def provide_llm_env(template_path: str, root_path: pathlib.Path | NotReady) -> jinja2.Environment:
    """Provide Jinja2 environment for LLM prompt templates.

    Prompts are not markup, so autoescape is off and block whitespace is
    trimmed.
    """
    if isinstance(root_path, NotReady):
        raise RuntimeError("root path is unavailable")

    env = jinja2.Environment(
        loader=jinja2.FileSystemLoader(root_path.joinpath(template_path)),
        autoescape=False,
        trim_blocks=True,
        lstrip_blocks=True,
        undefined=jinja2.StrictUndefined,
    )
    env.policies.update({
        "json.dumps_function": assessor.lib.json.dumps,
    })
    return env


class TemplateContainer(DeclarativeContainer):
    config: Configuration = Configuration(strict=True)
    root: Provider[pathlib.Path | NotReady] = Object()

    llm: Provider[jinja2.Environment] = ThreadSafeSingleton(provide_llm_env, config.llm_path, root)
