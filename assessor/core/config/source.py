"""Settings sources: command-line overrides, per-environment YAML files and secrets.

Sources read the `root` and `env` passed to `Settings`/`Secrets` from
pydantic-settings' current state, so they must follow the init source.
"""

import functools
import typing as t
from pathlib import Path

import pydantic as p
import yaml
from pydantic_settings import PydanticBaseSettingsSource
from pydantic_settings import SettingsError

import assessor.lib.util as util
from assessor.model import DeploymentEnvironment

# given directly to Settings/Secrets, never read from files
BootKeys = frozenset({"env", "root", "override"})


def env_paths(root: p.AnyUrl, env: DeploymentEnvironment) -> list[Path]:
    """Directories searched for YAML files, least specific first.

    `local` uses the root alone; any other environment adds `env.d/<env>/`.
    """
    if root.scheme != "file" or root.path is None:
        raise SettingsError(f"configuration root is not a local directory: {root}")
    paths = [Path(root.path)]
    if env is not DeploymentEnvironment.Local:
        paths.append(Path(root.path) / "env.d" / env.value)
    return paths


def load_yaml(fn: Path) -> t.Any:
    try:
        return yaml.safe_load(fn.read_text(encoding="utf8"))
    except yaml.YAMLError as e:
        raise SettingsError(f"invalid YAML in {fn}") from e


class MappingSettingsSource(PydanticBaseSettingsSource):
    """A source whose values come from one mapping of top-level field name to value."""

    @property
    def root(self) -> p.AnyUrl:
        return self.current_state["root"]

    @property
    def env(self) -> DeploymentEnvironment:
        return self.current_state["env"]

    @functools.cached_property
    def settings_values(self) -> dict[str, t.Any]:
        raise NotImplementedError

    def get_field_value(self, field: p.fields.FieldInfo, field_name: str) -> tuple[t.Any, str, bool]:
        return self.settings_values.get(field_name), field_name, False

    def __call__(self) -> dict[str, t.Any]:
        return {
            name: self.settings_values[name]
            for name in self.settings_cls.model_fields
            if name not in BootKeys and self.settings_values.get(name) is not None
        }


class OverrideSettingsSource(MappingSettingsSource):
    """Applies `-o section.key=value` overrides, e.g. `-o llm.models.grading.model=gpt-4o`.

    Values are parsed as YAML scalars; partial sections are deep-merged over the
    YAML files by pydantic-settings.
    """

    @functools.cached_property
    def settings_values(self) -> dict[str, t.Any]:
        od: dict[str, t.Any] = {}
        for o in self.current_state.get("override", ()):
            if "=" not in o:
                raise SettingsError(f"override must have the form key=value: {o!r}")
            k, v = [s.strip() for s in o.split("=", 1)]
            *path, key = k.split(".")
            target = od
            for part in path:
                target = target.setdefault(part, {})
            target[key] = yaml.safe_load(v)
        return od


class YAMLCascadingSettingsSource(MappingSettingsSource):
    """Loads `<section>.yaml` for each settings section; a file under `env.d/<env>/` replaces the root one."""

    @functools.cached_property
    def settings_values(self) -> dict[str, t.Any]:
        loaded: dict[str, t.Any] = {}
        for path in env_paths(self.root, self.env):
            for name in self.settings_cls.model_fields:
                fn = path / f"{name}.yaml"
                if name not in BootKeys and fn.exists():
                    loaded[name] = load_yaml(fn)
        return loaded


class YAMLSecretsSource(MappingSettingsSource):
    """Reads `secrets.yaml` from the secrets root; environment files are merged over the root one."""

    @functools.cached_property
    def settings_values(self) -> dict[str, t.Any]:
        if self.root.scheme != "file":
            return {}
        loaded: dict[str, t.Any] = {}
        for path in env_paths(self.root, self.env):
            fn = path / "secrets.yaml"
            if fn.exists():
                loaded = util.deep_update(loaded, load_yaml(fn) or {})
        return loaded
