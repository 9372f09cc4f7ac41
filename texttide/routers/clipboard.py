# texttide/routers/clipboard.py
# FastAPI router for the shared clipboard API

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Body, Depends, Query, Request, status

from texttide import config
from texttide.constants import DELETED_MESSAGE
from texttide.schemas.clipboard import (
    ClipboardCreateRequest,
    ClipboardDeleteRequest,
    ClipboardItemView,
    ClipboardLikeRequest,
    ClipboardUpdateRequest,
    LikeToggleResult,
    MessageResponse,
)
from texttide.services.clipboard_service import ClipboardService
from texttide.services.identity import client_address


router = APIRouter(tags=["Clipboard"])


def get_service(request: Request) -> ClipboardService:
    return request.app.state.clipboard_service


def get_visitor_id(request: Request) -> str:
    """Identity of the caller, resolved once per request."""
    resolver = request.app.state.identity_resolver
    address = client_address(
        request.headers.get("x-forwarded-for"),
        request.client.host if request.client else None,
    )
    return resolver.resolve(address, request.headers.get("user-agent"))


@router.get(
    "/clipboard",
    response_model=List[ClipboardItemView],
    response_model_exclude_none=True,
)
async def list_clipboard(
    service: ClipboardService = Depends(get_service),
    visitor_id: str = Depends(get_visitor_id),
) -> List[ClipboardItemView]:
    """All live items, newest first."""
    return await service.list_items(visitor_id)


@router.post(
    "/clipboard",
    response_model=ClipboardItemView,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
)
async def create_clipboard(
    payload: ClipboardCreateRequest,
    service: ClipboardService = Depends(get_service),
    visitor_id: str = Depends(get_visitor_id),
) -> ClipboardItemView:
    return await service.create_item(payload.text, payload.editable, visitor_id)


@router.put(
    "/clipboard",
    response_model=ClipboardItemView,
    response_model_exclude_none=True,
)
async def update_clipboard(
    payload: ClipboardUpdateRequest,
    service: ClipboardService = Depends(get_service),
    visitor_id: str = Depends(get_visitor_id),
) -> ClipboardItemView:
    return await service.update_item(payload.id, payload.text, visitor_id)


@router.patch("/clipboard", response_model=LikeToggleResult)
async def like_clipboard(
    payload: ClipboardLikeRequest,
    service: ClipboardService = Depends(get_service),
    visitor_id: str = Depends(get_visitor_id),
) -> LikeToggleResult:
    """Toggle the caller's like on an item."""
    return await service.toggle_like(payload.id, visitor_id, payload.action)


@router.delete("/clipboard", response_model=MessageResponse)
async def delete_clipboard(
    payload: Optional[ClipboardDeleteRequest] = Body(default=None),
    service: ClipboardService = Depends(get_service),
) -> MessageResponse:
    await service.delete_item(payload.id if payload else None)
    return MessageResponse(message=DELETED_MESSAGE)


@router.get(
    "/clipboard/top",
    response_model=List[ClipboardItemView],
    response_model_exclude_none=True,
)
async def top_liked_clipboard(
    limit: int = Query(config.TOP_LIKED_LIMIT, ge=1, le=50),
    service: ClipboardService = Depends(get_service),
    visitor_id: str = Depends(get_visitor_id),
) -> List[ClipboardItemView]:
    return await service.top_liked(visitor_id, limit)


@router.get(
    "/clipboard/{item_id}",
    response_model=ClipboardItemView,
    response_model_exclude_none=True,
)
async def get_clipboard(
    item_id: str,
    service: ClipboardService = Depends(get_service),
    visitor_id: str = Depends(get_visitor_id),
) -> ClipboardItemView:
    return await service.get_item(item_id, visitor_id)
