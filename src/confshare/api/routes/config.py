"""Configuration endpoints: one route per channel verb, resolved by the router.

``GET`` carries queries, ``POST`` inserts, ``DELETE`` deletes and ``PUT``
updates. Handlers are plain ``def`` so FastAPI runs each request on its worker
thread pool, concurrently with the others.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends, Request

from confshare.models import (
    Action,
    ConfigRequest,
    ConfigResponse,
    InsertBody,
    TypeResult,
)
from confshare.router import ConfigRouter

log = logging.getLogger(__name__)

router = APIRouter(tags=["config"])


def _config_router(req: Request) -> ConfigRouter:
    return req.app.state.config_router


async def _insert_body(req: Request) -> InsertBody:
    """Parse the insert payload leniently; unusable input leaves fields unset."""
    payload: Any = None
    if await req.body():
        try:
            payload = await req.json()
        except ValueError:
            log.debug("Ignoring undecodable insert body for %s", req.url.path)
    return InsertBody.from_payload(payload)


@router.get("/{authority}/{path}/type", response_model=TypeResult)
def get_type(authority: str, path: str, req: Request) -> TypeResult:
    """MIME-like type of an operation, ``null`` for unknown paths."""
    return TypeResult(type=_config_router(req).get_type(authority, path))


@router.get("/{authority}/{path}", response_model=None)
def query(
    authority: str,
    path: str,
    req: Request,
    key: Optional[str] = None,
) -> Optional[ConfigResponse]:
    request = ConfigRequest(action=Action.QUERY, authority=authority, path=path, key=key)
    return _config_router(req).dispatch(request)


@router.post("/{authority}/{path}", response_model=None)
def insert(
    authority: str,
    path: str,
    req: Request,
    body: InsertBody = Depends(_insert_body),
) -> Optional[ConfigResponse]:
    request = ConfigRequest(
        action=Action.INSERT,
        authority=authority,
        path=path,
        key=body.key,
        value=body.value,
        values=body.values,
    )
    return _config_router(req).dispatch(request)


@router.delete("/{authority}/{path}", response_model=None)
def delete(
    authority: str,
    path: str,
    req: Request,
    key: Optional[str] = None,
) -> Optional[ConfigResponse]:
    request = ConfigRequest(action=Action.DELETE, authority=authority, path=path, key=key)
    return _config_router(req).dispatch(request)


@router.put("/{authority}/{path}", response_model=None)
def update(
    authority: str,
    path: str,
    req: Request,
    comments: Optional[str] = None,
) -> Optional[ConfigResponse]:
    request = ConfigRequest(action=Action.UPDATE, authority=authority, path=path, comments=comments)
    return _config_router(req).dispatch(request)
