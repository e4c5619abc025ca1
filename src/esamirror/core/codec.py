"""Post document format: TOML frontmatter between +++ lines, then the body.

    +++
    tags = ["a", "b"]
    wip = true
    number = 123
    +++

    <body, verbatim>

``decode(encode(meta, body))`` returns an equal (meta, body) pair.
"""

from __future__ import annotations

import re
import tomllib
from collections.abc import Iterator

import toml
from frontmatter.default_handlers import BaseHandler

from esamirror.core.errors import FormatInvalidError, MetaInvalidError
from esamirror.core.models import Meta

DELIMITER = "+++"

_SHORT_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "\b": "\\b",
    "\t": "\\t",
    "\n": "\\n",
    "\f": "\\f",
    "\r": "\\r",
}


def _basic_string(value: str) -> str:
    """Quote *value* as a TOML basic string."""
    out = []
    for ch in value:
        if ch in _SHORT_ESCAPES:
            out.append(_SHORT_ESCAPES[ch])
        elif ch < " " or ch == "\x7f":
            out.append(f"\\u{ord(ch):04X}")
        else:
            out.append(ch)
    return '"' + "".join(out) + '"'


class _MetaEncoder(toml.TomlEncoder):
    """Render arrays as ``["a", "b"]`` and escape strings per the TOML spec.

    toml's own string dumper turns a literal ``\\x41`` into ``\\u0041`` and
    drops the backslash from control characters.
    """

    def dump_value(self, v):
        if isinstance(v, str):
            return _basic_string(v)
        return super().dump_value(v)

    def dump_list(self, v):
        return "[" + ", ".join(str(self.dump_value(u)) for u in v) + "]"


def _lines(text: str) -> Iterator[tuple[int, int]]:
    """Yield (start, end) offsets of each line; end includes the newline."""
    start = 0
    while start < len(text):
        end = text.find("\n", start)
        end = len(text) if end == -1 else end + 1
        yield start, end
        start = end


class PostHandler(BaseHandler):
    """python-frontmatter handler for +++ delimited TOML metadata.

    Splitting scans line by line for the delimiter; the body is returned
    verbatim apart from one blank separator line after the closing ``+++``.
    """

    FM_BOUNDARY = re.compile(r"\+{3}")

    def _is_delimiter(self, line: str) -> bool:
        return self.FM_BOUNDARY.fullmatch(line.strip()) is not None

    def split(self, text: str) -> tuple[str, str]:
        lines = _lines(text)

        for start, end in lines:
            line = text[start:end]
            if not line.strip():
                continue
            if not self._is_delimiter(line):
                raise FormatInvalidError(f"document must start with a '{DELIMITER}' line")
            fm_start = end
            break
        else:
            raise FormatInvalidError(f"missing opening '{DELIMITER}' line")

        for start, end in lines:
            if self._is_delimiter(text[start:end]):
                fm = text[fm_start:start]
                body_start = end
                break
        else:
            raise FormatInvalidError(f"missing closing '{DELIMITER}' line")

        for start, end in lines:
            if not text[start:end].strip():
                body_start = end
            break

        return fm, text[body_start:]

    def load(self, fm: str, **kwargs) -> dict:
        try:
            return tomllib.loads(fm, **kwargs)
        except tomllib.TOMLDecodeError as e:
            raise MetaInvalidError(f"meta info is invalid: {e}") from e

    def export(self, metadata: dict, **kwargs) -> str:
        return toml.dumps(metadata, encoder=_MetaEncoder()).strip()


_handler = PostHandler()


def encode(meta: Meta, body: str | None) -> str:
    """Render a post document. A None body is written as empty."""
    header = _handler.export(meta.to_dict())
    return f"{DELIMITER}\n{header}\n{DELIMITER}\n\n{body or ''}"


def decode(text: str) -> tuple[Meta, str]:
    """Parse a post document into (meta, body).

    Raises:
        FormatInvalidError: No opening/closing ``+++`` pair.
        MetaInvalidError: Frontmatter is not valid TOML or fields are wrong.
    """
    fm, body = _handler.split(text)
    return Meta.from_mapping(_handler.load(fm)), body
