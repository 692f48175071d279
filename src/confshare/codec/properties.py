"""Properties-style text codec: ``key=value`` lines with backslash escapes.

The format is the one read and written by ``java.util.Properties``:

* ``#`` and ``!`` start comment lines, blank lines are ignored.
* A line ending in an odd number of backslashes continues on the next line.
* The key ends at the first unescaped ``=``, ``:`` or whitespace.
* ``\\t``, ``\\n``, ``\\r``, ``\\f`` and ``\\uXXXX`` are decoded; any other
  escaped character stands for itself.

Writing escapes ``=``, ``:``, ``#``, ``!``, backslashes, control whitespace and
(optionally) every non-printable-ASCII character as ``\\uXXXX``.
"""

from __future__ import annotations

import logging
import os
import re
import string
from collections.abc import Iterator, Mapping
from datetime import datetime
from pathlib import Path

from confshare.exceptions import CodecError

log = logging.getLogger(__name__)

_NEWLINE = re.compile(r"\r\n|\r|\n")
_WHITESPACE = " \t\f"
_SEPARATORS = "=:"
_HEX = frozenset(string.hexdigits)

_UNESCAPES = {"t": "\t", "n": "\n", "r": "\r", "f": "\f"}
_ESCAPES = {
    "\\": "\\\\",
    "\t": "\\t",
    "\n": "\\n",
    "\r": "\\r",
    "\f": "\\f",
    "=": "\\=",
    ":": "\\:",
    "#": "\\#",
    "!": "\\!",
}


# ── Reading ───────────────────────────────────────────────────────────


def _continues(line: str) -> bool:
    """True when *line* ends in an odd number of backslashes."""
    count = len(line) - len(line.rstrip("\\"))
    return count % 2 == 1


def _logical_lines(text: str) -> Iterator[str]:
    natural = iter(_NEWLINE.split(text))
    for line in natural:
        line = line.lstrip(_WHITESPACE)
        if not line or line[0] in "#!":
            continue
        parts: list[str] = []
        while _continues(line):
            parts.append(line[:-1])
            line = next(natural, "").lstrip(_WHITESPACE)
        parts.append(line)
        yield "".join(parts)


def _split_entry(line: str) -> tuple[str, str]:
    escaped = False
    for index, char in enumerate(line):
        if escaped:
            escaped = False
        elif char == "\\":
            escaped = True
        elif char in _SEPARATORS:
            return line[:index], line[index + 1 :].lstrip(_WHITESPACE)
        elif char in _WHITESPACE:
            rest = line[index + 1 :].lstrip(_WHITESPACE)
            if rest[:1] and rest[0] in _SEPARATORS:
                rest = rest[1:].lstrip(_WHITESPACE)
            return line[:index], rest
    return line, ""


def _join_surrogates(text: str) -> str:
    if not any("\ud800" <= char <= "\udfff" for char in text):
        return text
    return text.encode("utf-16-le", "surrogatepass").decode("utf-16-le", "surrogatepass")


def _unescape(text: str) -> str:
    out: list[str] = []
    index, length = 0, len(text)
    while index < length:
        char = text[index]
        index += 1
        if char != "\\":
            out.append(char)
            continue
        if index >= length:
            break
        char = text[index]
        index += 1
        if char == "u":
            digits = text[index : index + 4]
            if len(digits) < 4 or not _HEX.issuperset(digits):
                raise CodecError(f"Malformed \\uxxxx encoding: \\u{digits}")
            out.append(chr(int(digits, 16)))
            index += 4
        else:
            out.append(_UNESCAPES.get(char, char))
    return _join_surrogates("".join(out))


def loads(text: str) -> dict[str, str]:
    """Parse properties text into an ordered ``dict``.

    Later occurrences of a key override earlier ones.

    Raises:
        CodecError: If a ``\\uXXXX`` escape is malformed.
    """
    result: dict[str, str] = {}
    for line in _logical_lines(text):
        key, value = _split_entry(line)
        result[_unescape(key)] = _unescape(value)
    return result


# ── Writing ───────────────────────────────────────────────────────────


def _unicode_escape(char: str) -> str:
    code = ord(char)
    if code > 0xFFFF:
        code -= 0x10000
        high, low = 0xD800 + (code >> 10), 0xDC00 + (code & 0x3FF)
        return f"\\u{high:04X}\\u{low:04X}"
    return f"\\u{code:04X}"


def _escape(text: str, *, is_key: bool, escape_unicode: bool) -> str:
    out: list[str] = []
    for index, char in enumerate(text):
        if char == " ":
            out.append("\\ " if is_key or index == 0 else " ")
        elif char in _ESCAPES:
            out.append(_ESCAPES[char])
        elif escape_unicode and not (" " < char <= "~"):
            out.append(_unicode_escape(char))
        else:
            out.append(char)
    return "".join(out)


def _comment_lines(comments: str, *, escape_unicode: bool) -> list[str]:
    lines = []
    for line in _NEWLINE.split(comments):
        if escape_unicode:
            line = "".join(c if c <= "~" else _unicode_escape(c) for c in line)
        lines.append(line if line[:1] in ("#", "!") else f"#{line}")
    return lines


def dumps(
    mapping: Mapping[str, str],
    comments: str | None = None,
    *,
    escape_unicode: bool = False,
    timestamp: datetime | None = None,
) -> str:
    """Serialise *mapping* to properties text.

    Args:
        mapping: Entries to write, in iteration order.
        comments: Optional comment block written before the timestamp line.
        escape_unicode: Write every character outside printable ASCII as
            ``\\uXXXX`` so the output is pure ASCII.
        timestamp: Time written in the header line; defaults to now.
    """
    lines: list[str] = []
    if comments is not None:
        lines.extend(_comment_lines(comments, escape_unicode=escape_unicode))
    stamp = timestamp or datetime.now().astimezone()
    lines.append("#" + stamp.strftime("%a %b %d %H:%M:%S %Z %Y"))
    for key, value in mapping.items():
        k = _escape(key, is_key=True, escape_unicode=escape_unicode)
        v = _escape(value, is_key=False, escape_unicode=escape_unicode)
        lines.append(f"{k}={v}")
    return "\n".join(lines) + "\n"


# ── Files ─────────────────────────────────────────────────────────────


class PropertiesCodec:
    """Reads and writes properties files in a fixed character encoding."""

    def __init__(self, encoding: str = "utf-8", *, escape_unicode: bool = False) -> None:
        self._encoding = encoding
        self._escape_unicode = escape_unicode

    @property
    def encoding(self) -> str:
        return self._encoding

    def read(self, path: Path) -> dict[str, str]:
        """Decode the file at *path*. ``OSError`` and ``UnicodeError`` propagate."""
        with open(path, encoding=self._encoding, newline="") as f:
            text = f.read()
        entries = loads(text)
        log.debug("Decoded %d entries from %s", len(entries), path)
        return entries

    def write(
        self,
        path: Path,
        mapping: Mapping[str, str],
        comments: str | None = None,
        *,
        atomic: bool = False,
    ) -> None:
        """Encode *mapping* into the file at *path*.

        The file is overwritten in place unless *atomic* is set, in which case
        a sibling temporary file is written and renamed over *path*.
        """
        text = dumps(mapping, comments, escape_unicode=self._escape_unicode)
        data = text.encode(self._encoding)
        if not atomic:
            with open(path, "wb") as f:
                f.write(data)
            return
        tmp = path.with_name(path.name + ".tmp")
        try:
            with open(tmp, "wb") as f:
                f.write(data)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp, path)
        except OSError:
            tmp.unlink(missing_ok=True)
            raise
