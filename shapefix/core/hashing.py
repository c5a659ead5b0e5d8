from __future__ import annotations

import hashlib
import json
from dataclasses import asdict, is_dataclass
from typing import Any

from shapefix.geometry.primitives import Point2D, Shape2D


def sha256_bytes(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


def _normalize(obj: Any) -> Any:
    if isinstance(obj, Shape2D):
        return [list(p.as_tuple()) for p in obj.points]
    if isinstance(obj, Point2D):
        return list(obj.as_tuple())
    if is_dataclass(obj) and not isinstance(obj, type):
        return _normalize(asdict(obj))
    if isinstance(obj, dict):
        return {str(k): _normalize(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [_normalize(v) for v in obj]
    return obj


def stable_json_dumps(obj: Any) -> str:
    normalized = _normalize(obj)
    return json.dumps(normalized, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


def shape_digest(shape: Shape2D) -> str:
    return sha256_bytes(stable_json_dumps(shape).encode("utf-8"))
