# texttide/handlers/clipboard_handler.py
# Tornado handlers for the shared clipboard API

import json
from typing import Any, Optional

import tornado.web
from tornado import httputil
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from texttide import config
from texttide.constants import CLIPBOARD_ITEM_METHODS, CLIPBOARD_METHODS, DELETED_MESSAGE
from texttide.exceptions import AppError, MethodNotAllowedError, ValidationError, error_body
from texttide.observability.metrics import InstrumentedHandlerMixin
from texttide.schemas.clipboard import (
    ClipboardCreateRequest,
    ClipboardDeleteRequest,
    ClipboardLikeRequest,
    ClipboardUpdateRequest,
)
from texttide.services.clipboard_service import ClipboardService
from texttide.services.identity import HeaderIdentityResolver, IdentityResolver, client_address
from texttide.utils.logger import json_error, json_response, log_info
from texttide.utils.logger import log_exception as log_error_trace


class BaseClipboardHandler(InstrumentedHandlerMixin, tornado.web.RequestHandler):
    """Shared plumbing: identity, JSON bodies, error envelope."""

    def initialize(self, service: ClipboardService, identity_resolver: Optional[IdentityResolver] = None):
        self.service = service
        self.identity_resolver = identity_resolver or HeaderIdentityResolver()

    @property
    def visitor_id(self) -> str:
        if not hasattr(self, "_visitor_id"):
            address = client_address(
                self.request.headers.get("X-Forwarded-For"),
                self.request.remote_ip,
            )
            self._visitor_id = self.identity_resolver.resolve(
                address, self.request.headers.get("User-Agent")
            )
        return self._visitor_id

    def parse_body(self, model: type[BaseModel], required: bool = True) -> Any:
        raw = self.request.body
        if not raw:
            if required:
                raise ValidationError("Request body is required")
            return model()
        try:
            body = json.loads(raw.decode("utf-8"))
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            log_info(f"{type(self).__name__}: invalid JSON - {e}")
            raise ValidationError("Invalid JSON body") from e
        if not isinstance(body, dict):
            raise ValidationError("Body must be a JSON object")
        try:
            return model.model_validate(body)
        except PydanticValidationError as e:
            raise ValidationError(
                "Invalid request body",
                details={"errors": [
                    {"loc": list(err["loc"]), "msg": err["msg"]} for err in e.errors()
                ]},
            ) from e

    def write_error(self, status_code: int, **kwargs):
        exc = kwargs["exc_info"][1] if "exc_info" in kwargs else None
        if status_code == 405 and not isinstance(exc, AppError):
            exc = MethodNotAllowedError(self.request.method, list(self.SUPPORTED_METHODS))
        if isinstance(exc, AppError):
            if isinstance(exc, MethodNotAllowedError):
                self.set_header("Allow", ", ".join(exc.allowed))
            payload = error_body(exc.error_code, exc.message, exc.details)
            json_error(self, payload, exc.status_code)
            return
        if status_code >= 500:
            details = None
            if config.DEBUG and exc is not None:
                details = {"type": type(exc).__name__}
            payload = error_body(
                "INTERNAL_ERROR", "An internal error occurred. Please try again later.", details
            )
        else:
            payload = error_body("HTTP_ERROR", httputil.responses.get(status_code, "Unknown"))
        json_error(self, payload, status_code)

    def log_exception(self, typ, value, tb):
        # AppErrors are expected outcomes, not crashes
        if isinstance(value, AppError):
            log_info(f"{type(self).__name__}: {value.status_code} {value.error_code} - {value.message}")
            return
        if not isinstance(value, tornado.web.HTTPError):
            log_error_trace(value, f"{type(self).__name__}: {self.request.method} {self.request.path}")
        super().log_exception(typ, value, tb)


class ClipboardHandler(BaseClipboardHandler):
    """/api/clipboard - list, create, edit, like and delete."""

    SUPPORTED_METHODS = tuple(CLIPBOARD_METHODS)

    async def get(self):
        items = await self.service.list_items(self.visitor_id)
        json_response(self, [item.to_response() for item in items])

    async def post(self):
        payload = self.parse_body(ClipboardCreateRequest)
        item = await self.service.create_item(payload.text, payload.editable, self.visitor_id)
        log_info(f"ClipboardHandler: created id={item.id}")
        json_response(self, item.to_response(), status=201)

    async def put(self):
        payload = self.parse_body(ClipboardUpdateRequest)
        item = await self.service.update_item(payload.id, payload.text, self.visitor_id)
        json_response(self, item.to_response())

    async def patch(self):
        payload = self.parse_body(ClipboardLikeRequest)
        result = await self.service.toggle_like(payload.id, self.visitor_id, payload.action)
        json_response(self, result.model_dump(by_alias=True))

    async def delete(self):
        payload = self.parse_body(ClipboardDeleteRequest, required=False)
        await self.service.delete_item(payload.id)
        json_response(self, {"message": DELETED_MESSAGE})


class ClipboardTopHandler(BaseClipboardHandler):
    """/api/clipboard/top - most liked items."""

    SUPPORTED_METHODS = tuple(CLIPBOARD_ITEM_METHODS)

    async def get(self):
        raw_limit = self.get_query_argument("limit", str(config.TOP_LIKED_LIMIT))
        try:
            limit = int(raw_limit)
        except ValueError:
            raise ValidationError("limit must be an integer", details={"limit": raw_limit})
        if not 1 <= limit <= 50:
            raise ValidationError("limit must be between 1 and 50", details={"limit": limit})
        items = await self.service.top_liked(self.visitor_id, limit)
        json_response(self, [item.to_response() for item in items])


class ClipboardItemHandler(BaseClipboardHandler):
    """/api/clipboard/<id> - one item for the share page."""

    SUPPORTED_METHODS = tuple(CLIPBOARD_ITEM_METHODS)

    async def get(self, item_id: str):
        item = await self.service.get_item(item_id, self.visitor_id)
        json_response(self, item.to_response())


class LivenessHandler(tornado.web.RequestHandler):
    """GET /health/live"""

    def get(self):
        self.write({"status": "alive"})
