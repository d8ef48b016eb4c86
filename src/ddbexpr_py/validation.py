from __future__ import annotations

import re
from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from .errors import ValidationError

MaxNestedDepth = 32
MaxExpressionLength = 4096  # DynamoDB expression size limit
MaxInValues = 100

_INDEX_SUFFIX = re.compile(r"^(\[[0-9]+\])*$")


@dataclass(frozen=True)
class PathSegment:
    key: str
    indexes: str = ""


def is_number(value: Any) -> bool:
    return isinstance(value, (int, float, Decimal)) and not isinstance(value, bool)


def split_path(path: str) -> list[PathSegment]:
    """Split a dotted attribute path into segments.

    Each segment is a key followed by an optional list index suffix such as
    ``[0]`` or ``[1][2]``. The suffix is returned verbatim and is never escaped.
    """
    if not path:
        raise ValidationError("attribute path cannot be empty")

    parts = path.split(".")
    if len(parts) > MaxNestedDepth:
        raise ValidationError("attribute path depth exceeds maximum")

    return [_split_segment(part) for part in parts]


def _split_segment(part: str) -> PathSegment:
    key, bracket, rest = part.partition("[")
    if not key:
        raise ValidationError(f"invalid attribute path segment: {part!r}")

    indexes = bracket + rest
    if _INDEX_SUFFIX.match(indexes) is None:
        raise ValidationError(f"invalid list index in attribute path segment: {part!r}")
    return PathSegment(key=key, indexes=indexes)


def validate_expression(expression: str) -> None:
    if len(expression) > MaxExpressionLength:
        raise ValidationError("expression exceeds maximum length")
