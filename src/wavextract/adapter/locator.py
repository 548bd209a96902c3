"""Resolve a path or structured source descriptor into a media locator."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping
from urllib.parse import unquote, urlparse

from wavextract.errors import LocatorError
from wavextract.models.types import SourceDescriptor

REMOTE_SCHEMES = frozenset({"http", "https"})


@dataclass(frozen=True)
class Locator:
    """Resolved media location.

    Attributes:
        uri: Remote URL, or local filesystem path as a string.
        is_remote: True for http/https sources.
        headers: Request headers for remote sources (empty for local).
    """

    uri: str
    is_remote: bool
    headers: dict[str, str] = field(default_factory=dict)

    @property
    def path(self) -> Path:
        """Local filesystem path (only meaningful when not remote)."""
        return Path(self.uri)


def resolve_locator(
    path: str | Path | None = None,
    source: SourceDescriptor | Mapping[str, Any] | None = None,
) -> Locator:
    """Turn a path or source descriptor into a Locator.

    A source with a non-empty uri takes precedence over path.

    Args:
        path: Local path or URL string.
        source: SourceDescriptor or mapping with `uri` and optional `headers`.

    Returns:
        Resolved Locator.

    Raises:
        LocatorError: If neither input yields a usable location.
    """
    uri: str | None = None
    headers: dict[str, str] = {}

    if source is not None:
        if isinstance(source, Mapping):
            source_uri = source.get("uri")
            source_headers = source.get("headers") or {}
        else:
            source_uri = source.uri
            source_headers = source.headers
        if isinstance(source_uri, str) and source_uri:
            uri = source_uri
            headers = {str(k): str(v) for k, v in source_headers.items()}

    if uri is None and path:
        uri = str(path)

    if uri is None:
        raise LocatorError(
            "Failed to initialise URL from provided audio source. "
            "If path contains `file://` try removing it"
        )

    parsed = urlparse(uri)
    scheme = parsed.scheme.lower()

    if scheme in REMOTE_SCHEMES:
        if not parsed.netloc:
            raise LocatorError(f"Invalid remote audio URL: {uri}")
        return Locator(uri=uri, is_remote=True, headers=headers)

    if scheme == "file":
        local = unquote(parsed.path)
        if not local:
            raise LocatorError(f"Invalid file URL: {uri}")
        return Locator(uri=local, is_remote=False)

    return Locator(uri=uri, is_remote=False)
