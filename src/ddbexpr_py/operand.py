from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Literal, TypeAlias

OperandRole: TypeAlias = Literal["name", "value"]
OperandKind: TypeAlias = Literal["path", "reference", "literal"]

# A reference runs from "#" up to the next structural delimiter.
REFERENCE_PATTERN = re.compile(r"#([^\s(),]+)")


@dataclass(frozen=True)
class ParsedOperand:
    kind: OperandKind
    value: Any


def parse_operand(operand: Any, default_role: OperandRole) -> ParsedOperand:
    """Classify a raw operand as an attribute path, embedded reference or literal.

    - ``":x"`` is always a literal; only the first colon is stripped, so ``"::x"``
      is the literal ``":x"`` and ``":#x"`` is the literal ``"#x"``.
    - Any other string containing ``#`` holds one or more attribute references,
      e.g. ``"#a"`` or ``"size(#a)"``; the text around them is kept as-is.
    - Everything else follows ``default_role``.
    """
    if isinstance(operand, str):
        if operand.startswith(":"):
            return ParsedOperand(kind="literal", value=operand[1:])
        if "#" in operand:
            return ParsedOperand(kind="reference", value=operand)

    if default_role == "name":
        return ParsedOperand(kind="path", value=str(operand))
    return ParsedOperand(kind="literal", value=operand)


class Operand:
    @staticmethod
    def size(path: str) -> str:
        """Refer to the size of an attribute, e.g. ``{Operand.size("b"): Condition.gt(4)}``."""
        return f"size(#{path})"

    @staticmethod
    def get(path: str) -> str:
        """Refer to another attribute, e.g. ``{"a": Condition.gt(Operand.get("b"))}``."""
        return f"#{path}"

    @staticmethod
    def value(value: Any) -> Any:
        """Force a string to be read as a literal value even if it contains ``#`` or ``:``."""
        if isinstance(value, str):
            return f":{value}"
        return value
