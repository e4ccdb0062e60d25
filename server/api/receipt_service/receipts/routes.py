import logging
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool
import httpx

from receipt_service.errors import InternalError, MalformedPayloadError, ReceiptError, RequestShapeError, UpstreamError, UnreachableError
from receipt_service.schemas.receipt import ErrorResponse, GenerateRequest
from .fetch import fetch_json, resolve_locator, validate_locator
from .memo import ResultMemo
from .render import render_receipt
from .shape import ensure_mapping
from .stream import pdf_response

logger = logging.getLogger(__name__)

router = APIRouter(tags=["receipt"])

def get_memo(request: Request) -> ResultMemo:
    return request.app.state.memo

def get_http(request: Request) -> httpx.AsyncClient:
    return request.app.state.http

def error_response(err: ReceiptError) -> JSONResponse:
    return JSONResponse(status_code=err.status_code, content=ErrorResponse(error=err.message).model_dump())

def _build_pdf(req: GenerateRequest, payload: dict, logo_path: str) -> bytes:
    try:
        return render_receipt(req.id, req.time, payload, logo_path).to_bytes()
    except Exception as e:
        raise InternalError() from e

@router.post("/generate-table-pdf", responses={400: {"model": ErrorResponse}, 503: {"model": ErrorResponse}, 500: {"model": ErrorResponse}})
async def generate_table_pdf(
    req: GenerateRequest,
    request: Request,
    memo: ResultMemo = Depends(get_memo),
    http: httpx.AsyncClient = Depends(get_http),
):
    try:
        if not (req.id and req.time and req.url):
            raise RequestShapeError()
        validate_locator(req.url)

        key = resolve_locator(req.url, req.id, req.time)
        cached = memo.get(key)
        if cached is not None:
            logger.debug("memo hit %s", key)
            return pdf_response(cached, "hit")

        logger.debug("memo miss %s", key)
        payload = ensure_mapping(await fetch_json(http, key))
        # reportlab is synchronous and CPU bound
        data = await run_in_threadpool(_build_pdf, req, payload, request.app.state.logo_path)
        memo.set(key, data)
        return pdf_response(data, "miss")

    except (UpstreamError, UnreachableError) as e:
        logger.warning("upstream failure for id=%s: %s", req.id, e.message)
        return error_response(e)
    except MalformedPayloadError as e:
        logger.error("malformed payload for id=%s: %s", req.id, e.detail)
        return error_response(e)
    except InternalError as e:
        logger.exception("render failed for id=%s", req.id)
        return error_response(e)
    except ReceiptError as e:
        logger.info("rejected request id=%s: %s", req.id, e.message)
        return error_response(e)
    except Exception:
        logger.exception("unexpected failure for id=%s", req.id)
        return error_response(InternalError())
