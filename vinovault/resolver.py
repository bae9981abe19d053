"""Map request paths to files under the document root.

The containment check here is the only security boundary of the server:
every candidate is normalized (``..`` segments and symlinks resolved) and
must still sit inside the document root, otherwise it is rejected before
any read happens.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional


class ResolutionKind(Enum):
    ASSET = "asset"
    ENTRY = "entry"
    REJECTED = "rejected"


@dataclass(frozen=True)
class Resolution:
    kind: ResolutionKind
    path: Optional[Path] = None

    @property
    def rejected(self) -> bool:
        return self.kind is ResolutionKind.REJECTED


REJECTED = Resolution(ResolutionKind.REJECTED)


def resolve_request_path(url_path: str, document_root: Path, entry_document: str = "index.html") -> Resolution:
    """Resolve a decoded URL path against *document_root*.

    Args:
        url_path: The request path, already percent-decoded.
        document_root: Absolute, resolved bundle directory.
        entry_document: SPA shell, relative to the root.

    Returns:
        ``ENTRY`` for "/" or the entry document itself, ``ASSET`` for any
        other candidate inside the root, ``REJECTED`` otherwise.
    """
    entry_path = document_root / entry_document
    relative = url_path.lstrip("/")
    if not relative:
        return Resolution(ResolutionKind.ENTRY, entry_path)

    if "\x00" in relative:
        return REJECTED

    try:
        candidate = (document_root / relative).resolve()
    except (OSError, RuntimeError, ValueError):
        # e.g. a symlink loop
        return REJECTED

    if not candidate.is_relative_to(document_root):
        return REJECTED
    if candidate == entry_path:
        return Resolution(ResolutionKind.ENTRY, entry_path)
    return Resolution(ResolutionKind.ASSET, candidate)
