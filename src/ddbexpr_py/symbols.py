from __future__ import annotations

import logging
import re
from collections.abc import MutableMapping
from typing import Any

from .errors import ValidationError
from .operand import REFERENCE_PATTERN, OperandRole, parse_operand
from .validation import split_path

logger = logging.getLogger(__name__)

NAMES_KEY = "ExpressionAttributeNames"
VALUES_KEY = "ExpressionAttributeValues"

_INVALID_PLACEHOLDER_CHARS = re.compile(r"[^A-Za-z0-9_]+")


def path_token(path: str) -> str:
    """Turn an attribute path into a fragment usable inside a value placeholder."""
    return _INVALID_PLACEHOLDER_CHARS.sub("_", path).strip("_")


def _same_value(left: Any, right: Any) -> bool:
    if left is right:
        return True
    if type(left) is not type(right):
        return False
    return bool(left == right)


class SymbolTable:
    """Allocates name and value placeholders into a params mapping.

    The mapping holds the ``ExpressionAttributeNames`` and
    ``ExpressionAttributeValues`` tables. Both are created on first use and only
    ever grow: an existing placeholder is reused for an identical key or value
    and never rebound, so several renders can share one params object.
    """

    def __init__(self, params: MutableMapping[str, Any] | None = None, *, value_prefix: str = "") -> None:
        self.params: MutableMapping[str, Any] = params if params is not None else {}
        self.value_prefix = value_prefix

    def _table(self, key: str) -> MutableMapping[str, Any]:
        table = self.params.get(key)
        if table is None:
            table = {}
            self.params[key] = table
        if not isinstance(table, MutableMapping):
            raise ValidationError(f"{key} must be a mapping")
        return table

    def bind_name(self, key: str) -> str:
        token = _INVALID_PLACEHOLDER_CHARS.sub("", key) or "_"
        return _bind(self._table(NAMES_KEY), f"#{token}", key)

    def bind_path(self, path: str) -> str:
        return ".".join(self.bind_name(seg.key) + seg.indexes for seg in split_path(path))

    def bind_value(self, value: Any, disambiguator: str) -> str:
        token = _INVALID_PLACEHOLDER_CHARS.sub("_", disambiguator).strip("_") or "v"
        return _bind(self._table(VALUES_KEY), f":{self.value_prefix}{token}", value)

    def resolve(self, operand: Any, default_role: OperandRole, prefix: str = "") -> str:
        parsed = parse_operand(operand, default_role)
        if parsed.kind == "literal":
            return self.bind_value(parsed.value, prefix)
        if parsed.kind == "reference":
            return REFERENCE_PATTERN.sub(lambda m: self.bind_path(m.group(1)), parsed.value)
        return self.bind_path(parsed.value)


def _bind(table: MutableMapping[str, Any], candidate: str, value: Any) -> str:
    placeholder = candidate
    suffix = 0
    while placeholder in table and not _same_value(table[placeholder], value):
        suffix += 1
        placeholder = f"{candidate}_{suffix}"

    if placeholder not in table:
        if suffix:
            logger.debug("placeholder %s already bound, using %s", candidate, placeholder)
        table[placeholder] = value
    return placeholder
