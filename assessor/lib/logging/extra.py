import json
import logging
import string
import sys
import textwrap
import typing as t

import pygments
from pygments.formatters import Terminal256Formatter
from pygments.lexers.data import JsonLexer  # pyright: ignore [reportMissingTypeStubs]
from pygments.style import Style

from assessor.lib.json import JSONEncoder, JSONValue

from .style import LogStyle

# attributes every LogRecord carries; anything else came in through `extra=`
ReservedKeys = frozenset(logging.LogRecord("", 0, "", 0, "", None, None).__dict__) | {
    "asctime",
    "color_message",
    "log_color",
    "message",
}


class LogJSONEncoder(JSONEncoder):
    def default(self, o: t.Any) -> JSONValue:
        try:
            return super().default(o)
        except TypeError:
            return repr(o)


def clip(value: t.Any, limit: int) -> t.Any:
    """Shorten long strings (question text, student answers) so a log line stays readable."""
    if isinstance(value, str) and len(value) > limit:
        return value[: limit - 1] + "…"
    if isinstance(value, list):
        return [clip(v, limit) for v in value]
    if isinstance(value, dict):
        return {k: clip(v, limit) for k, v in value.items()}
    return value


class ExtraFormatter(logging.Formatter):
    """
    Wraps a base formatter and appends the record's `extra=` fields as JSON,
    highlighted when stderr is a terminal and colour is not disabled
    """

    def __init__(
        self,
        base: type[logging.Formatter],
        format: str | None,
        datefmt: str | None = None,
        indent: bool | None = True,
        max_value_length: int = 200,
        pyg_style: type[Style] = LogStyle,
        style: t.Literal["%", "{", "$"] = "%",
        *,
        no_color: bool = False,
        **kwargs: t.Any,
    ):
        if no_color:
            kwargs["no_color"] = True
        self.base = base(format, datefmt=datefmt, style=style, **kwargs)
        self.indent = 4 if indent else None
        self.max_value_length = max_value_length
        self.highlight = not no_color and sys.stderr.isatty()
        self.pyg_style = pyg_style

    def format(self, record: logging.LogRecord) -> str:
        if "color_message" in record.__dict__:
            record.msg = record.__dict__.pop("color_message")

        msg = record.getMessage()
        if "\n" in msg:
            # continuation lines are aligned under the first line of the message
            prefix = self.base.format(record).split(msg, 1)[0]
            indent = " " * sum(c in string.printable for c in prefix)
            line, *lines = msg.splitlines()
            body = textwrap.indent("\n".join(lines), prefix=indent)
            record.msg = f"{line}\n{body}"
            record.args = None
        message = self.base.format(record)

        extra = {k: clip(v, self.max_value_length) for k, v in record.__dict__.items() if k not in ReservedKeys}
        if not extra:
            return message

        js = json.dumps(extra, sort_keys=True, indent=self.indent, cls=LogJSONEncoder, ensure_ascii=False)
        if self.highlight:
            hl = pygments.highlight  # pyright: ignore [reportUnknownMemberType, reportUnknownVariableType]
            js = hl(js, JsonLexer(), Terminal256Formatter(style=self.pyg_style), None).strip()
        return f"{message} {js}"

    def __getattr__(self, name: str) -> t.Any:
        return getattr(self.base, name)
