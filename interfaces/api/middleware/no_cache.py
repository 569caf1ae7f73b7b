from collections.abc import Awaitable, Callable
from email.utils import formatdate

from fastapi import Request, Response

NO_CACHE_HEADERS = {
    "Expires": "Mon, 26 Jul 1997 05:00:00 GMT",
    "Cache-Control": "no-store, no-cache, must-revalidate, post-check=0, pre-check=0",
    "Pragma": "no-cache",
}


async def add_no_cache_headers(
    request: Request,
    call_next: Callable[[Request], Awaitable[Response]],
) -> Response:
    """Keep upload responses out of client caches (some mobile browsers cache POSTs)."""
    response = await call_next(request)
    response.headers.update(NO_CACHE_HEADERS)
    response.headers["Last-Modified"] = formatdate(usegmt=True)
    return response
