from __future__ import annotations

import importlib
import sys
import threading
import typing as t
from pathlib import Path

import pydantic as p

import assessor
import assessor.lib.cli as click
from assessor.core import AssessorContainer
from assessor.model import DeploymentEnvironment

DefaultConfigRoot = Path(assessor.__file__).resolve().parents[1] / "config"

# subcommand name -> module under assessor.cli defining a click command of that name
Subcommands = {
    "evaluate": "evaluate",
    "schema": "schema",
    "web": "web",
}


class LazyGroup(click.Group):
    """Imports a subcommand's module only when it is invoked, and wires it once booted."""

    def __init__(self, *args: t.Any, **kwargs: t.Any):
        super().__init__(*args, **kwargs)
        self.loaded: list[str] = []

    def list_commands(self, ctx: click.Context) -> list[str]:
        return sorted(Subcommands)

    def get_command(self, ctx: click.Context, cmd_name: str) -> click.Command | None:
        if cmd_name not in Subcommands:
            return None
        module = f"assessor.cli.{Subcommands[cmd_name]}"
        self.loaded.append(module)
        return getattr(importlib.import_module(module), cmd_name)


@click.group(cls=LazyGroup)
@click.option("-E", "--env", default=DeploymentEnvironment.Local, type=click.EnumType(DeploymentEnvironment))
@click.option("-c", "--config-root", default=DefaultConfigRoot, type=click.URIParamType(dir_ok=True))
@click.option("-s", "--secrets-path", default=None, type=click.URIParamType(dir_ok=True))
@click.option(
    "-o",
    "--override",
    multiple=True,
    help="override a configuration value, e.g. -o llm.models.grading.model=gpt-4o",
)
@click.option("-D", "--debug", is_flag=True, default=False)
@click.pass_context
def main(
    ctx: click.Context,
    env: DeploymentEnvironment,
    config_root: p.FileUrl,
    secrets_path: p.AnyUrl | None,
    override: tuple[str, ...],
    debug: bool,
):
    """Score assessment submissions and manage the evaluation store."""
    group = t.cast(LazyGroup, ctx.command)
    AssessorContainer.boot(
        ctx.obj,
        debug=debug,
        env=env,
        config_root=config_root,
        secrets_path=secrets_path,
        override=override,
        wiring=tuple(group.loaded),
    )


def execute_command(*_args: str) -> None:
    threading.current_thread().name = "assessor-0"
    args = list(_args or sys.argv)
    container = AssessorContainer()

    try:
        # program name without its path, for help messages
        with main.make_context(Path(args[0]).name, args=args[1:]) as ctx:
            ctx.obj = container
            sys.exit(t.cast(int | None, main.invoke(ctx)))
    except (EOFError, KeyboardInterrupt, click.Abort):
        click.echo("Aborted!", file=sys.stderr)
        sys.exit(1)
    except click.exceptions.Exit as ex:
        sys.exit(ex.exit_code)
    except click.ClickException as ex:
        ex.show()
        sys.exit(ex.exit_code)
    except Exception as ex:
        click.echo(click.style("ERROR ", fg="red") + str(ex), file=sys.stderr)
        if "-D" in args or "--debug" in args:
            import traceback

            traceback.print_exc()
        sys.exit(1)
    finally:
        container.shutdown_resources()


if __name__ == "__main__":
    execute_command(*sys.argv)
