from contextlib import asynccontextmanager
from typing import Callable, Optional
import time

import httpx
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError

from receipt_service import config
from receipt_service.errors import RequestShapeError
from receipt_service.receipts.memo import ResultMemo
from receipt_service.receipts.routes import error_response, router as receipts_router

def create_app(
    cache_ttl: Optional[float] = None,
    fetch_timeout: Optional[float] = None,
    logo_path: Optional[str] = None,
    http: Optional[httpx.AsyncClient] = None,
    clock: Callable[[], float] = time.monotonic,
) -> FastAPI:
    """
    Build the service. The memo is created here, once per app, and shared by
    every request through app.state. Pass `http` to supply the outbound client
    (it is then left open on shutdown).
    """
    timeout = config.FETCH_TIMEOUT_SEC if fetch_timeout is None else fetch_timeout

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owned = http is None
        app.state.http = http or httpx.AsyncClient(timeout=httpx.Timeout(timeout), follow_redirects=True)
        try:
            yield
        finally:
            if owned:
                await app.state.http.aclose()

    app = FastAPI(title="Receipt PDF Service", lifespan=lifespan)
    app.state.memo = ResultMemo(ttl=config.CACHE_TTL_SEC if cache_ttl is None else cache_ttl, clock=clock)
    app.state.logo_path = config.LOGO_PATH if logo_path is None else logo_path

    @app.exception_handler(RequestValidationError)
    async def _bad_body(request: Request, exc: RequestValidationError):
        # body missing, not JSON, or fields of the wrong type
        return error_response(RequestShapeError())

    @app.get("/health")
    def health():
        return {"ok": True}

    app.include_router(receipts_router)
    return app

app = create_app()
