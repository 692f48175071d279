"""Tests for protocol models and URI helpers."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from confshare.models import ContainsResult, EntriesResult, Entry, InsertBody, build_type, build_uri


class TestUris:
    def test_build_uri(self) -> None:
        assert build_uri("com.example", "putAll") == "content://com.example/putAll"

    def test_segments_are_quoted(self) -> None:
        assert build_uri("com.example", "put", "a/b c") == "content://com.example/put/a%2Fb%20c"

    def test_build_type(self) -> None:
        assert build_type("com.example", "get") == "vnd.confshare.item/vnd.com.example.get"


class TestResults:
    def test_contains_is_zero_or_one(self) -> None:
        with pytest.raises(ValidationError):
            ContainsResult(key="k", contains=2)

    def test_entries_as_dict(self) -> None:
        rows = EntriesResult(rows=[Entry(key="a", value="1"), Entry(key="b", value="")])
        assert rows.as_dict() == {"a": "1", "b": ""}


class TestInsertBody:
    def test_scalars_become_text(self) -> None:
        body = InsertBody.from_payload({"key": "n", "value": 3, "values": {"a": False, "b": "x"}})
        assert body == InsertBody(key="n", value="3", values={"a": "false", "b": "x"})

    def test_batch_with_nested_value_is_dropped(self) -> None:
        assert InsertBody.from_payload({"values": {"a": "1", "b": [2]}}).values is None

    @pytest.mark.parametrize("payload", [None, [], "text", 7])
    def test_non_object_payload_leaves_fields_unset(self, payload: object) -> None:
        assert InsertBody.from_payload(payload) == InsertBody()
