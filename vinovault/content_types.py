"""Extension to Content-Type mapping for the files in the UI bundle."""

from enum import Enum
from pathlib import PurePath
from typing import Optional, Union

DEFAULT_CONTENT_TYPE = "application/octet-stream"


class Extension(str, Enum):
    HTML = ".html"
    JS = ".js"
    CSS = ".css"
    JSON = ".json"
    PNG = ".png"
    JPG = ".jpg"
    JPEG = ".jpeg"
    SVG = ".svg"
    # Source modules are loaded directly by the browser in dev bundles
    TS = ".ts"
    TSX = ".tsx"
    ICO = ".ico"


CONTENT_TYPES: dict[Extension, str] = {
    Extension.HTML: "text/html",
    Extension.JS: "text/javascript",
    Extension.CSS: "text/css",
    Extension.JSON: "application/json",
    Extension.PNG: "image/png",
    Extension.JPG: "image/jpeg",
    Extension.JPEG: "image/jpeg",
    Extension.SVG: "image/svg+xml",
    Extension.TS: "text/javascript",
    Extension.TSX: "text/javascript",
    Extension.ICO: "image/x-icon",
}


def extension_of(path: Union[str, PurePath]) -> Optional[Extension]:
    """Return the known extension of *path*, or None."""
    suffix = PurePath(path).suffix.lower()
    try:
        return Extension(suffix)
    except ValueError:
        return None


def content_type_for(path: Union[str, PurePath]) -> str:
    """Return the Content-Type for *path*. Never fails."""
    ext = extension_of(path)
    if ext is None:
        return DEFAULT_CONTENT_TYPE
    return CONTENT_TYPES[ext]
