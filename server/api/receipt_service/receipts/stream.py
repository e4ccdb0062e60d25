from typing import Iterator

from fastapi.responses import StreamingResponse

PDF_MEDIA_TYPE = "application/pdf"
CHUNK_SIZE = 64 * 1024

def iter_chunks(data: bytes, size: int = CHUNK_SIZE) -> Iterator[memoryview]:
    # slices of one memoryview, so the buffer is never copied
    view = memoryview(data)
    for start in range(0, len(view), size):
        yield view[start:start + size]

def pdf_response(data: bytes, cache_status: str) -> StreamingResponse:
    return StreamingResponse(
        iter_chunks(data),
        media_type=PDF_MEDIA_TYPE,
        headers={"Content-Length": str(len(data)), "X-Receipt-Cache": cache_status},
    )
