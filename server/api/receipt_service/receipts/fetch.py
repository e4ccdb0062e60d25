import json, logging
from typing import Any
from urllib.parse import quote, urlsplit

import httpx

from receipt_service.errors import MalformedPayloadError, RequestShapeError, UnreachableError, UpstreamError

logger = logging.getLogger(__name__)

def _encode_component(s: str) -> str:
    # same reserved set as encodeURIComponent
    return quote(s, safe="!'()*-._~")

def validate_locator(url: str) -> None:
    parts = urlsplit(url)
    if parts.scheme not in ("http", "https") or not parts.netloc:
        raise RequestShapeError('"url" must be an absolute http(s) address')

def resolve_locator(url: str, identifier: str, timestamp: str) -> str:
    """
    Full retrieval address for one receipt, also used as the memo key.
    Pure function of (url, identifier, timestamp).
    """
    return f"{url.rstrip('/')}/{_encode_component(identifier)}?time={_encode_component(timestamp)}"

async def fetch_json(client: httpx.AsyncClient, locator: str) -> Any:
    """
    Single GET against `locator`. The body is folded chunk by chunk into one
    buffer and decoded once the stream ends. No retries.
    """
    chunks: list[bytes] = []
    try:
        async with client.stream("GET", locator) as resp:
            if not resp.is_success:
                body = (await resp.aread()).decode("utf-8", errors="replace")
                raise UpstreamError(resp.status_code, body)
            async for chunk in resp.aiter_bytes():
                chunks.append(chunk)
    except httpx.RequestError as e:
        logger.warning("GET %s failed: %s: %s", locator, type(e).__name__, e)
        raise UnreachableError() from e

    raw = b"".join(chunks)
    try:
        return json.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise MalformedPayloadError(f"invalid JSON from {locator}: {e}") from e
