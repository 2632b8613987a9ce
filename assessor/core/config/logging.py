"""Schema for the `logging` settings section, handed to `logging.config.dictConfig`.

The service logs to a single colorized stream; structured `extra=` fields (assessment
ids, scores, question text) are appended as JSON by `ExtraFormatter`.
"""

import typing as t

import pydantic as p

from .base import BaseSettings

# https://github.com/python/cpython/blob/3.12/Lib/logging/__init__.py#L92-L99
LogLevel = t.Literal["NOTSET", "TRACE", "DEBUG", "INFO", "WARNING", "WARN", "ERROR", "FATAL", "CRITICAL"]


class FormatterSettings(BaseSettings):
    class_: t.Literal["assessor.lib.logging.ExtraFormatter"] = p.Field(alias="()")
    base: str = "ext://colorlog.ColoredFormatter"
    format: str | None = None
    max_value_length: int = 200
    datefmt: str | None = None
    log_colors: dict[str, str] = {}
    no_color: bool = False
    indent: bool | None = None


class HandlerSettings(BaseSettings):
    class_: t.Literal["colorlog.StreamHandler"] = p.Field(alias="class")
    formatter: str
    level: LogLevel = "NOTSET"
    stream: str = "ext://sys.stderr"


class LoggerSettings(BaseSettings):
    level: LogLevel = "NOTSET"
    propagate: bool = True
    handlers: list[str] | None = None


class RootLoggerSettings(BaseSettings):
    handlers: list[str]
    level: LogLevel = "NOTSET"


class LoggingSettings(BaseSettings):
    version: t.Literal[1]
    disable_existing_loggers: bool = True
    formatters: dict[str, FormatterSettings]
    handlers: dict[str, HandlerSettings]
    root: RootLoggerSettings
    loggers: dict[str, LoggerSettings] = {}

    @p.model_validator(mode="after")
    def check_references(self) -> t.Self:
        """Handlers must name a declared formatter, and loggers a declared handler."""
        for name, handler in self.handlers.items():
            if handler.formatter not in self.formatters:
                raise ValueError(f"handler {name!r} uses undeclared formatter {handler.formatter!r}")
        for name, logger in [("root", self.root), *self.loggers.items()]:
            missing = set(logger.handlers or ()) - set(self.handlers)
            if missing:
                raise ValueError(f"logger {name!r} uses undeclared handlers {sorted(missing)}")
        return self
