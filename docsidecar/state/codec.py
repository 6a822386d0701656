"""Text encoding of settings blobs.

A sidecar file is a marker comment followed by one JSON object. Keys are
sorted so the same blob always produces the same bytes.
"""
from __future__ import annotations

import json
from typing import Any, Dict

HEADER = "-- docsidecar metadata, one JSON object follows\n"
COMMENT_PREFIX = "--"


class SidecarDecodeError(ValueError):
    """Raised when sidecar text does not hold a settings mapping."""


def dumps(data: Dict[str, Any]) -> str:
    return HEADER + json.dumps(data, indent=2, sort_keys=True, ensure_ascii=False) + "\n"


def loads(text: str) -> Dict[str, Any]:
    lines = text.splitlines(keepends=True)
    index = 0
    while index < len(lines) and lines[index].lstrip().startswith(COMMENT_PREFIX):
        index += 1
    body = "".join(lines[index:])
    if not body.strip():
        raise SidecarDecodeError("sidecar holds no data")
    try:
        data = json.loads(body)
    except RecursionError as exc:
        raise SidecarDecodeError("sidecar data is nested too deeply") from exc
    if not isinstance(data, dict):
        raise SidecarDecodeError(f"sidecar root is {type(data).__name__}, expected an object")
    return data


__all__ = ["HEADER", "SidecarDecodeError", "dumps", "loads"]
