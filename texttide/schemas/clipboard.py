from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ClipboardItem(_CamelModel):
    """One shared text snippet as persisted in the store."""

    id: str
    text: str
    created_at: datetime
    updated_at: Optional[datetime] = None
    likes: list[str] = Field(default_factory=list)
    likes_count: int = 0
    creator_id: str = ""
    editable: bool = False

    @field_validator("created_at", "updated_at")
    @classmethod
    def assume_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        if v is not None and v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v

    @model_validator(mode="after")
    def sync_likes(self) -> "ClipboardItem":
        # dict.fromkeys keeps first-seen order
        self.likes = list(dict.fromkeys(self.likes))
        self.likes_count = len(self.likes)
        return self

    def can_edit(self, visitor_id: str) -> bool:
        return self.creator_id == visitor_id or self.editable is True

    def liked_by(self, visitor_id: str) -> bool:
        return visitor_id in self.likes

    def to_storage(self) -> dict:
        return self.model_dump(by_alias=True, mode="json", exclude_none=True)


class ClipboardItemView(ClipboardItem):
    """A clipboard item annotated for the visitor asking for it."""

    has_liked: bool = False

    @classmethod
    def for_visitor(cls, item: ClipboardItem, visitor_id: str) -> "ClipboardItemView":
        data = item.model_dump()
        data["has_liked"] = item.liked_by(visitor_id)
        data["editable"] = item.can_edit(visitor_id)
        return cls.model_validate(data)

    def to_response(self) -> dict:
        return self.model_dump(by_alias=True, mode="json", exclude_none=True)


class LikeToggleResult(_CamelModel):
    has_liked: bool
    likes_count: int


# --- Request bodies ---

class ClipboardCreateRequest(BaseModel):
    text: Optional[str] = None
    # only a literal JSON true marks an item editable
    editable: Any = False


class ClipboardUpdateRequest(BaseModel):
    id: Optional[str] = None
    text: Optional[str] = None


class ClipboardLikeRequest(BaseModel):
    id: Optional[str] = None
    action: Optional[str] = None


class ClipboardDeleteRequest(BaseModel):
    id: Optional[str] = None


class MessageResponse(BaseModel):
    message: str
