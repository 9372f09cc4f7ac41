from __future__ import annotations

from typing import Optional

from fastapi import FastAPI

from texttide import config
from texttide.bootstrap import build_service
from texttide.middleware.error_handler import ErrorHandlerMiddleware, setup_exception_handlers
from texttide.observability.tracing import init_tracing
from texttide.routers.clipboard import router as clipboard_router
from texttide.routers.health import router as health_router
from texttide.services.clipboard_service import ClipboardService
from texttide.services.identity import HeaderIdentityResolver, IdentityResolver


def create_app(
    service: Optional[ClipboardService] = None,
    identity_resolver: Optional[IdentityResolver] = None,
) -> FastAPI:
    """Build the ASGI app; tests inject an in-memory service and fixed identities."""
    app = FastAPI(
        title="TextTide API",
        description="Share text snippets by short link, like them, and edit them",
        version="1.0.0",
    )

    app.state.clipboard_service = service or build_service(config)
    app.state.identity_resolver = identity_resolver or HeaderIdentityResolver()

    # Error handler is the outermost user middleware
    app.add_middleware(ErrorHandlerMiddleware, debug=config.DEBUG)
    setup_exception_handlers(app)

    # kept on state so 405 responses can list every method on a path
    app.state.mounted_routers = [("", health_router), ("/api", clipboard_router)]
    for prefix, router in app.state.mounted_routers:
        app.include_router(router, prefix=prefix)

    init_tracing(config, app=app)
    return app


app = create_app()


def get_app() -> FastAPI:
    return app
