"""Pydantic models for the configuration request protocol.

A request names an *authority* (the host it targets), an *action* (the verb the
channel carried) and a *path* (the symbolic operation). Each path belongs to
exactly one action.
"""

from __future__ import annotations

import json
from enum import Enum
from typing import Any, Optional, Union
from urllib.parse import quote

from pydantic import BaseModel, Field

CONTENT_SCHEME = "content"
TYPE_PREFIX = "vnd.confshare.item"


class Action(str, Enum):
    """Channel verb a request arrives with."""

    QUERY = "query"
    INSERT = "insert"
    DELETE = "delete"
    UPDATE = "update"


class RequestPath(str, Enum):
    """The eight operations a host serves."""

    CONTAINS = "contains"
    GET = "get"
    GET_ALL = "getAll"
    PUT = "put"
    PUT_ALL = "putAll"
    REMOVE = "remove"
    CLEAR = "clear"
    SAVE = "save"

    @property
    def action(self) -> Action:
        return _PATH_ACTIONS[self]


_PATH_ACTIONS: dict[RequestPath, Action] = {
    RequestPath.CONTAINS: Action.QUERY,
    RequestPath.GET: Action.QUERY,
    RequestPath.GET_ALL: Action.QUERY,
    RequestPath.PUT: Action.INSERT,
    RequestPath.PUT_ALL: Action.INSERT,
    RequestPath.REMOVE: Action.DELETE,
    RequestPath.CLEAR: Action.DELETE,
    RequestPath.SAVE: Action.UPDATE,
}


def build_uri(authority: str, path: str, *segments: str) -> str:
    """Build ``content://<authority>/<path>[/<segment>...]`` with quoted segments."""
    tail = "".join("/" + quote(segment, safe="") for segment in segments)
    return f"{CONTENT_SCHEME}://{authority}/{path}{tail}"


def build_type(authority: str, path: str) -> str:
    """MIME-like type string of one operation on one authority."""
    return f"{TYPE_PREFIX}/vnd.{authority}.{path}"


# ── Request ──────────────────────────────────────────────────────────


class ConfigRequest(BaseModel):
    """One stateless call addressed to a host."""

    action: Action
    authority: str
    path: str
    key: Optional[str] = None
    value: Optional[str] = None
    values: Optional[dict[str, str]] = None
    comments: Optional[str] = None


class InsertBody(BaseModel):
    """JSON body of ``put`` / ``putAll`` requests."""

    key: Optional[str] = None
    value: Optional[str] = None
    values: Optional[dict[str, str]] = None

    @classmethod
    def from_payload(cls, payload: Any) -> InsertBody:
        """Read whatever JSON arrived, leaving fields it cannot use unset.

        Scalars are taken as their text form. A ``values`` batch that is not an
        object, or holds a non-scalar value, is dropped as a whole.
        """
        if not isinstance(payload, dict):
            return cls()
        values = payload.get("values")
        batch: Optional[dict[str, str]] = None
        if isinstance(values, dict):
            texts = {str(k): _as_text(v) for k, v in values.items()}
            if all(t is not None for t in texts.values()):
                batch = texts  # type: ignore[assignment]
        return cls(key=_as_text(payload.get("key")), value=_as_text(payload.get("value")), values=batch)


def _as_text(value: Any) -> Optional[str]:
    if isinstance(value, str):
        return value
    if isinstance(value, (bool, int, float)):
        return json.dumps(value)
    return None


# ── Responses ────────────────────────────────────────────────────────


class Entry(BaseModel):
    """A single key/value row."""

    key: str
    value: str


class ContainsResult(BaseModel):
    key: str
    contains: int = Field(ge=0, le=1)


class ValueResult(BaseModel):
    value: Optional[str] = None


class EntriesResult(BaseModel):
    rows: list[Entry] = Field(default_factory=list)

    def as_dict(self) -> dict[str, str]:
        return {row.key: row.value for row in self.rows}


class InsertResult(BaseModel):
    """Echo of an insert: the target URI and how many pairs were submitted."""

    uri: str
    count: int = 1


class CountResult(BaseModel):
    count: int = 0


class TypeResult(BaseModel):
    type: Optional[str] = None


ConfigResponse = Union[ContainsResult, ValueResult, EntriesResult, InsertResult, CountResult]
