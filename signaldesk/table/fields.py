from __future__ import annotations

import dataclasses
import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, List, Mapping, Sequence, Tuple

from pydantic import BaseModel

from signaldesk.core.exceptions import InvalidFieldPathError

_SEGMENT = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$|^\d+$")


@dataclass(frozen=True)
class FieldPath:
    """A validated dotted path into a record, e.g. ``pair.symbol``."""

    segments: Tuple[str, ...]

    @classmethod
    def parse(cls, path: str | "FieldPath") -> "FieldPath":
        if isinstance(path, FieldPath):
            return path
        if not isinstance(path, str):
            raise InvalidFieldPathError(f"field path must be a string: {path!r}")
        return _parse_cached(path)

    def resolve(self, record: Any) -> Any:
        """Walk the record one segment at a time; any missing step yields None."""
        current = record
        for segment in self.segments:
            current = _step(current, segment)
            if current is None:
                return None
        return current

    def __str__(self) -> str:
        return ".".join(self.segments)


@lru_cache(maxsize=256)
def _parse_cached(path: str) -> FieldPath:
    if not path.strip():
        raise InvalidFieldPathError(f"empty field path: {path!r}")
    segments = tuple(part.strip() for part in path.strip().split("."))
    for segment in segments:
        if not _SEGMENT.match(segment):
            raise InvalidFieldPathError(f"invalid segment {segment!r} in {path!r}")
    return FieldPath(segments)


def _step(current: Any, segment: str) -> Any:
    if isinstance(current, Mapping):
        return current.get(segment)
    if isinstance(current, Sequence) and not isinstance(current, (str, bytes)):
        if not segment.isdigit():
            return None
        index = int(segment)
        return current[index] if index < len(current) else None
    if segment.isdigit() or segment.startswith("_"):
        return None
    return getattr(current, segment, None)


def resolve(record: Any, path: str | FieldPath) -> Any:
    return FieldPath.parse(path).resolve(record)


def top_level_values(record: Any) -> List[Any]:
    """Top-level attribute values of a mapping, dataclass, pydantic model or object."""
    if isinstance(record, Mapping):
        return list(record.values())
    if dataclasses.is_dataclass(record) and not isinstance(record, type):
        return [getattr(record, f.name) for f in dataclasses.fields(record)]
    if isinstance(record, BaseModel):
        return [getattr(record, name) for name in type(record).model_fields]
    if hasattr(record, "__dict__"):
        return [v for k, v in vars(record).items() if not k.startswith("_")]
    return [record]


__all__ = ["FieldPath", "resolve", "top_level_values"]
