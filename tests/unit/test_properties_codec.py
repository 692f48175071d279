"""Tests for the properties text codec."""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

import pytest

from confshare.codec.properties import PropertiesCodec, dumps, loads
from confshare.exceptions import CodecError

_STAMP = datetime(2024, 3, 15, 9, 30, 0, tzinfo=timezone.utc)


def _body(text: str) -> list[str]:
    """Lines after the comment header."""
    return [line for line in text.splitlines() if not line.startswith("#")]


class TestDumps:
    def test_header_then_entries(self) -> None:
        text = dumps({"a": "1", "b": "2"}, timestamp=_STAMP)
        lines = text.splitlines()
        assert lines[0] == "#Fri Mar 15 09:30:00 UTC 2024"
        assert lines[1:] == ["a=1", "b=2"]
        assert text.endswith("\n")

    def test_comments_are_prefixed(self) -> None:
        text = dumps({}, "first\nsecond", timestamp=_STAMP)
        assert text.splitlines()[:2] == ["#first", "#second"]

    def test_comment_lines_already_marked_are_kept(self) -> None:
        text = dumps({}, "one\n!two", timestamp=_STAMP)
        assert text.splitlines()[:2] == ["#one", "!two"]

    def test_escapes_separators_and_spaces(self) -> None:
        text = dumps({"key with space": " lead = x:y#!\\"}, timestamp=_STAMP)
        assert _body(text) == ["key\\ with\\ space=\\ lead \\= x\\:y\\#\\!\\\\"]

    def test_escapes_control_whitespace(self) -> None:
        text = dumps({"k": "a\tb\nc\rd\fe"}, timestamp=_STAMP)
        assert _body(text) == ["k=a\\tb\\nc\\rd\\fe"]

    def test_non_ascii_written_raw_by_default(self) -> None:
        text = dumps({"greeting": "héllo 世界"}, timestamp=_STAMP)
        assert _body(text) == ["greeting=héllo 世界"]

    def test_escape_unicode(self) -> None:
        text = dumps({"é": "世😀"}, escape_unicode=True, timestamp=_STAMP)
        assert _body(text) == ["\\u00E9=\\u4E16\\uD83D\\uDE00"]
        assert text.isascii()


class TestLoads:
    def test_separators(self) -> None:
        assert loads("a=1\nb : 2\nc 3\nd\t=\t4\n") == {"a": "1", "b": "2", "c": "3", "d": "4"}

    def test_comments_and_blank_lines_are_skipped(self) -> None:
        text = "# comment\n! bang\n\n   \n  # indented comment\nkey=value\n"
        assert loads(text) == {"key": "value"}

    def test_key_without_value(self) -> None:
        assert loads("lonely\n") == {"lonely": ""}

    def test_only_first_separator_splits(self) -> None:
        assert loads("url=http://host:80/a=b\n") == {"url": "http://host:80/a=b"}

    def test_escaped_separator_in_key(self) -> None:
        assert loads("a\\=b\\:c\\ d=e\n") == {"a=b:c d": "e"}

    def test_line_continuation(self) -> None:
        text = "fruits = apple, \\\n         banana, \\\n    pear\n"
        assert loads(text) == {"fruits": "apple, banana, pear"}

    def test_even_backslashes_do_not_continue(self) -> None:
        assert loads("a=x\\\\\nb=y\n") == {"a": "x\\", "b": "y"}

    def test_continuation_at_end_of_text(self) -> None:
        assert loads("a=x\\") == {"a": "x"}

    def test_mixed_line_endings(self) -> None:
        assert loads("a=1\r\nb=2\rc=3") == {"a": "1", "b": "2", "c": "3"}

    def test_unicode_escapes(self) -> None:
        assert loads("name=\\u00e9t\\u00E9\nface=\\uD83D\\uDE00\n") == {"name": "été", "face": "😀"}

    def test_other_escapes_stand_for_themselves(self) -> None:
        assert loads("k=\\q\\t\\\\\n") == {"k": "q\t\\"}

    def test_later_keys_override(self) -> None:
        assert loads("a=1\na=2\n") == {"a": "2"}

    def test_malformed_unicode_escape(self) -> None:
        with pytest.raises(CodecError, match="Malformed"):
            loads("a=\\u12G4\n")

    def test_truncated_unicode_escape(self) -> None:
        with pytest.raises(CodecError):
            loads("a=\\u12")


@pytest.mark.parametrize("escape_unicode", [False, True])
def test_round_trip_preserves_tricky_entries(escape_unicode: bool) -> None:
    mapping = {
        "plain": "value",
        " leading key": " leading value",
        "trailing ": "trailing ",
        "sep=:#!": "sep=:#!",
        "multi\nline": "a\r\nb\tc\fd",
        "back\\slash": "end\\",
        "ünïcödé": "中文 😀",
        "empty": "",
    }
    assert loads(dumps(mapping, "comment line", escape_unicode=escape_unicode)) == mapping


class TestPropertiesCodec:
    def test_write_then_read(self, tmp_path: Path) -> None:
        path = tmp_path / "config.properties"
        codec = PropertiesCodec()
        codec.write(path, {"a": "1", "ü": "ß"}, "header")
        assert codec.read(path) == {"a": "1", "ü": "ß"}
        assert path.read_text(encoding="utf-8").startswith("#header\n")

    def test_configured_encoding_is_used(self, tmp_path: Path) -> None:
        path = tmp_path / "latin.properties"
        codec = PropertiesCodec("latin-1")
        codec.write(path, {"k": "café"})
        assert "café".encode("latin-1") in path.read_bytes()
        assert codec.read(path) == {"k": "café"}

    def test_atomic_write_leaves_no_temp_file(self, tmp_path: Path) -> None:
        path = tmp_path / "config.properties"
        path.write_text("old=1\n", encoding="utf-8")
        PropertiesCodec().write(path, {"new": "2"}, atomic=True)
        assert PropertiesCodec().read(path) == {"new": "2"}
        assert list(tmp_path.iterdir()) == [path]

    def test_failed_atomic_write_removes_temp_file(self, tmp_path: Path) -> None:
        path = tmp_path / "config.properties"
        path.mkdir()
        with pytest.raises(OSError):
            PropertiesCodec().write(path, {"a": "1"}, atomic=True)
        assert list(tmp_path.iterdir()) == [path]

    def test_read_missing_file_raises_oserror(self, tmp_path: Path) -> None:
        with pytest.raises(OSError):
            PropertiesCodec().read(tmp_path / "missing.properties")
