from pygments.style import Style
from pygments.token import Keyword, Name, Number, Punctuation, String


class LogStyle(Style):
    """Muted JSON highlighting for the `extra` payload of log lines."""

    styles = {
        Punctuation: "#808080",
        Name.Tag: "#5f87af",
        String: "#87af5f",
        String.Double: "#87af5f",
        Number: "#d7875f",
        Keyword.Constant: "#af5faf",
    }
