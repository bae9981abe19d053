"""Static asset delivery with single-page-app fallback."""

import logging
import os
import stat
from pathlib import Path

import anyio
from starlette.responses import FileResponse, PlainTextResponse, Response

from vinovault.config import Settings
from vinovault.content_types import content_type_for
from vinovault.resolver import resolve_request_path

logger = logging.getLogger(__name__)

# Assets are revalidated on every load; the bundle is redeployed often
CACHE_CONTROL = "no-cache"


async def stat_asset(path: Path) -> os.stat_result:
    """Stat a file without blocking the event loop."""
    return await anyio.Path(path).stat()


def asset_response(path: Path, stat_result: os.stat_result, status_code: int = 200) -> Response:
    # An explicit Content-Type keeps Starlette from appending a charset
    return FileResponse(
        path,
        status_code=status_code,
        headers={"Content-Type": content_type_for(path), "Cache-Control": CACHE_CONTROL},
        stat_result=stat_result,
    )


async def serve_with_fallback(path: Path, entry_path: Path, fallback_status: int = 200) -> Response:
    """Serve *path*, else the entry document, else 404.

    The entry document is tried at most once, and only when *path* is not
    the entry document already.
    """
    attempts = [(path, 200)]
    if path != entry_path:
        attempts.append((entry_path, fallback_status))

    for candidate, status_code in attempts:
        try:
            st = await stat_asset(candidate)
        except OSError as e:
            logger.debug(f"Could not stat {candidate}: {e}")
            continue
        if not stat.S_ISREG(st.st_mode):
            logger.debug(f"Not a regular file: {candidate}")
            continue
        return asset_response(candidate, st, status_code)

    logger.error(f"Entry document {entry_path} is unreadable; the bundle looks broken")
    return PlainTextResponse("Not Found", status_code=404)


async def serve_request(method: str, url_path: str, settings: Settings) -> Response:
    """Resolve and serve one non-probe request."""
    logger.info(f"{method} {url_path}")

    root = settings.document_root
    resolution = resolve_request_path(url_path, root, settings.ENTRY_DOCUMENT)
    if resolution.rejected:
        logger.warning(f"Rejected path outside document root: {url_path}")
        return PlainTextResponse("Forbidden", status_code=403)

    return await serve_with_fallback(resolution.path, root / settings.ENTRY_DOCUMENT)
