"""Base image references derived from a definition's origin.

An origin is the URL of a directory holding a kernel and a root
filesystem image. The local cache name reverses the host labels and
dot-joins the path, so ``https://images.example.com/ubuntu/focal``
is cached as ``com.example.images:ubuntu.focal`` under
``<images_dir>/com.example.images#ubuntu.focal``.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path

_SCHEME_PATTERN = re.compile(r"^.*?://")
_DUPLICATE_SLASHES = re.compile(r"([^:])/{2,}")
_SIZE_PATTERN = re.compile(
    r"^\s*(\d+)\s*(?:([KMGT])(iB|B)?)?\s*$", re.IGNORECASE,
)
_SIZE_UNITS = "KMGT"


@dataclass(frozen=True)
class ImageReference:
    """Locally cached base image resolved from an origin URL."""

    origin: str
    namespace: str
    object_name: str
    directory: Path

    @property
    def name(self) -> str:
        return f"{self.namespace}:{self.object_name}"

    def artifact_url(self, artifact: str) -> str:
        """Remote URL of an artifact with duplicate slashes collapsed."""
        return _DUPLICATE_SLASHES.sub(r"\1/", f"{self.origin}/{artifact}")

    def artifact_path(self, artifact: str) -> Path:
        return self.directory / artifact


def resolve_image(origin: str, images_dir: Path) -> ImageReference:
    """Resolve an origin URL to its local image reference.

    Raises ValueError if the origin has no host part.
    """
    stripped = _SCHEME_PATTERN.sub("", origin.strip(), count=1)
    host, _, path = stripped.partition("/")
    if not host:
        msg = f"Origin has no host: {origin!r}"
        raise ValueError(msg)
    namespace = ".".join(reversed(host.split(".")))
    object_name = ".".join(s for s in path.split("/") if s)
    return ImageReference(
        origin=origin.strip(),
        namespace=namespace,
        object_name=object_name,
        directory=images_dir / f"{namespace}#{object_name}",
    )


def parse_size(text: str) -> int:
    """Convert a size such as ``512M`` or ``2G`` to bytes.

    Follows truncate -s: K, M, G, T and KiB, MiB, GiB, TiB are powers
    of 1024, while KB, MB, GB, TB are powers of 1000. A bare number is
    bytes. Raises ValueError for anything else.
    """
    match = _SIZE_PATTERN.match(text)
    if match is None:
        msg = f"Invalid size: {text!r}"
        raise ValueError(msg)
    count, unit, suffix = match.groups()
    if unit is None:
        return int(count)
    base = 1000 if suffix is not None and suffix.upper() == "B" else 1024
    return int(count) * base ** (_SIZE_UNITS.index(unit.upper()) + 1)
