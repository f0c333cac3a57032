from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Optional

import httpx
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from efi_proxy.core.config import Settings
from efi_proxy.core.errors import ProxyError
from efi_proxy.core.result import Failure, render
from efi_proxy.gateway.transport import TransportFactory


def create_app(
    settings: Optional[Settings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    settings = settings or Settings.from_env()

    # -------------------------------------------------------------------------
    # App
    # -------------------------------------------------------------------------
    transports = TransportFactory(settings, transport=transport)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await transports.preload()
        yield

    app = FastAPI(title="EFI mTLS Proxy", lifespan=lifespan)
    app.state.settings = settings
    app.state.transports = transports

    # -------------------------------------------------------------------------
    # Erros -> {"error": ..., "details": ...}
    # -------------------------------------------------------------------------
    @app.exception_handler(ProxyError)
    async def _proxy_error(request: Request, exc: ProxyError):
        return render(Failure.from_error(exc))

    @app.exception_handler(RequestValidationError)
    async def _invalid_body(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=400,
            content={"error": "Invalid request body", "details": jsonable_errors(exc)},
        )

    # -------------------------------------------------------------------------
    # Routers
    # -------------------------------------------------------------------------
    from efi_proxy.api.routes import health, pix

    app.include_router(health.router, tags=["health"])
    app.include_router(pix.router, tags=["pix"])

    return app


def jsonable_errors(exc: RequestValidationError) -> list[dict]:
    # ctx pode carregar objetos (ex.: Decimal) que o JSON não serializa
    return [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg"), "type": err.get("type")}
        for err in exc.errors()
    ]


app = create_app()
