from __future__ import annotations

from collections.abc import Set as AbstractSet
from dataclasses import dataclass
from typing import Any, Literal, TypeAlias

from .errors import ValidationError
from .validation import is_number

ActionKind: TypeAlias = Literal["SET", "REMOVE", "ADD", "DELETE"]
SetValueOp: TypeAlias = Literal["value", "+", "-", "list_append", "if_not_exists"]

ACTION_KINDS: tuple[ActionKind, ...] = ("SET", "REMOVE", "ADD", "DELETE")


@dataclass(frozen=True)
class SetValue:
    """The right-hand side of a SET action.

    Operands of ``+``, ``-`` and ``list_append`` are attribute paths when given as
    strings, nested ``SetValue`` nodes, or literal values otherwise.
    """

    op: SetValueOp
    operands: tuple[Any, ...]

    @staticmethod
    def from_value(value: Any) -> SetValue:
        return value if isinstance(value, SetValue) else SetValue.value(value)

    @staticmethod
    def value(value: Any) -> SetValue:
        return SetValue(op="value", operands=(value,))

    @staticmethod
    def add(left: Any, right: Any) -> SetValue:
        return SetValue(op="+", operands=(left, right))

    @staticmethod
    def subtract(left: Any, right: Any) -> SetValue:
        return SetValue(op="-", operands=(left, right))

    @staticmethod
    def append(left: Any, right: Any) -> SetValue:
        return SetValue(op="list_append", operands=(left, right))

    @staticmethod
    def if_not_exists(path: str, default: Any) -> SetValue:
        return SetValue(op="if_not_exists", operands=(path, default))


@dataclass(frozen=True)
class UpdateAction:
    kind: ActionKind
    value: Any = None

    @staticmethod
    def from_value(value: Any) -> UpdateAction:
        return value if isinstance(value, UpdateAction) else UpdateAction.set(value)

    @staticmethod
    def set(value: Any) -> UpdateAction:
        return UpdateAction(kind="SET", value=SetValue.from_value(value))

    @staticmethod
    def remove() -> UpdateAction:
        return UpdateAction(kind="REMOVE")

    @staticmethod
    def add(value: Any) -> UpdateAction:
        if isinstance(value, AbstractSet):
            if not value:
                raise ValidationError("ADD requires a non-empty set")
        elif not is_number(value):
            raise ValidationError("ADD requires a numeric value or a set")
        return UpdateAction(kind="ADD", value=value)

    @staticmethod
    def delete(value: Any) -> UpdateAction:
        if not isinstance(value, AbstractSet) or not value:
            raise ValidationError("DELETE requires a non-empty set")
        return UpdateAction(kind="DELETE", value=value)
