from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable
from uuid import UUID

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse, Response

from reprotrack.application.errors import PermissionDenied
from reprotrack.config.settings import Settings
from reprotrack.interfaces.middleware.error_handler import error_payload

API_PREFIX = "/api/v1"

PUBLIC_PATHS: Iterable[str] = (
    "/api/v1/health",
    "/docs",
    "/openapi.json",
    "/redoc",
)


@dataclass(slots=True, frozen=True)
class TenantContext:
    tenant_id: UUID


class TenantMiddleware(BaseHTTPMiddleware):
    """Resolves the tenant of every API request from the configured header."""

    def __init__(self, app, *, settings: Settings) -> None:
        super().__init__(app)
        self.settings = settings

    async def dispatch(self, request: Request, call_next) -> Response:
        # Let CORS preflight pass without tenant checks
        if request.method == "OPTIONS":
            return await call_next(request)
        path = request.url.path
        if not path.startswith(API_PREFIX) or any(path.startswith(p) for p in PUBLIC_PATHS):
            return await call_next(request)

        try:
            tenant_value = request.headers.get(self.settings.tenant_header)
            if not tenant_value:
                raise PermissionDenied(
                    "Missing tenant header", details={"header": self.settings.tenant_header}
                )
            try:
                tenant_id = UUID(tenant_value)
            except ValueError as exc:
                raise PermissionDenied(
                    "Invalid tenant identifier", details={"header": self.settings.tenant_header}
                ) from exc
        except PermissionDenied as exc:
            return JSONResponse(status_code=exc.status_code, content=error_payload(exc))

        request.state.tenant_context = TenantContext(tenant_id=tenant_id)
        return await call_next(request)
