import inspect
import logging.config
import typing as t

from .logging import TraceLogLevel, TraceLogLevelLogger


def trace(msg: str, *args: t.Any, **kwargs: t.Any):
    if len(logging.root.handlers) == 0:
        logging.basicConfig()
    t.cast(TraceLogLevelLogger, logging.root).trace(msg, *args, **kwargs)


class LoggingProvider(object):
    """Configures stdlib logging from the `logging` settings section."""

    def __init__(self, config: dict[str, t.Any], debug: bool):
        LoggingProvider.create_trace_loglevel()
        logging.config.dictConfig(config)
        if debug:
            self.capture_warnings(True)

    @staticmethod
    def create_trace_loglevel():
        logging.setLoggerClass(TraceLogLevelLogger)
        logging.addLevelName(TraceLogLevel, "TRACE")
        logging.TRACE = TraceLogLevel  # pyright: ignore [reportAttributeAccessIssue]
        logging.trace = trace  # pyright: ignore [reportAttributeAccessIssue]

    @classmethod
    def get_logger(cls, name: str | None = None, n_frames: int = 1) -> TraceLogLevelLogger:
        """Return the named logger, or the logger of the calling module."""
        if name is None:
            name = inspect.stack()[n_frames].frame.f_globals["__name__"]
        return t.cast(TraceLogLevelLogger, logging.getLogger(name))

    @staticmethod
    def capture_warnings(capture: bool):
        logging.captureWarnings(capture)
