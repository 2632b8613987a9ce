import logging
import typing as t

TraceLogLevel = 5


class TraceLogLevelLogger(logging.Logger):
    def trace(self, message: str, *args: t.Any, **kwargs: t.Any):
        if self.isEnabledFor(TraceLogLevel):
            self._log(TraceLogLevel, message, args, **kwargs)
