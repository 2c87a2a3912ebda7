"""Conversion between path segment lists and REST resource paths."""

from enum import Enum
from typing import Iterable
from urllib.parse import quote

JSON_SUFFIX = ".json"
ROOT = "/"


def _segment_name(segment: object) -> str:
    """Render one percent-encoded path segment (enum members use their value)."""
    name = segment.value if isinstance(segment, Enum) else segment
    return quote(str(name), safe="")


def encode_path(segments: Iterable[object]) -> str:
    """
    Build the REST resource path for a list of segments.

    Args:
        segments: Path segments, e.g. ["users", "alice"]

    Returns:
        Slash-joined path with the .json suffix ("users/alice.json").
        Reserved characters are percent-encoded, so "why?" becomes "why%3F".
        The root (no segments) encodes as ".json".
    """
    return "/".join(_segment_name(s) for s in segments) + JSON_SUFFIX


def decode_path(path: str) -> list[str]:
    """
    Split a wire path ("/users/alice") back into segments.

    The root marker "/" decodes to an empty list. Trailing empty segments are
    dropped, so "/a/b/" and "/a/b" are the same location.
    """
    if path in (ROOT, ""):
        return []

    if path.startswith("/"):
        path = path[1:]

    segments = path.split("/")
    while segments and segments[-1] == "":
        segments.pop()
    return segments
