from __future__ import annotations

import operator
from collections.abc import Callable, Mapping, Sequence
from collections.abc import Set as AbstractSet
from dataclasses import dataclass
from typing import Any, Literal, TypeAlias

from boto3.dynamodb.types import Binary

from .errors import UnrecognizedOperatorError, ValidationError
from .validation import MaxInValues, MaxNestedDepth, is_number

LogicalOp: TypeAlias = Literal["AND", "OR"]
AttributeType: TypeAlias = Literal["S", "SS", "N", "NS", "B", "BS", "BOOL", "NULL", "L", "M"]


class _Missing:
    def __repr__(self) -> str:
        return "MISSING"


MISSING: Any = _Missing()
"""Stands in for an attribute that is absent from the item."""

_COMPARATORS: dict[str, Callable[[Any, Any], Any]] = {
    "=": operator.eq,
    "<>": operator.ne,
    "<": operator.lt,
    "<=": operator.le,
    ">": operator.gt,
    ">=": operator.ge,
}

FUNCTIONS = frozenset(
    {"attribute_exists", "attribute_not_exists", "attribute_type", "begins_with", "contains", "size"}
)
OPERATORS = frozenset(_COMPARATORS) | FUNCTIONS | {"BETWEEN", "IN", "NOT", "AND", "OR"}
ATTRIBUTE_TYPES = frozenset({"S", "SS", "N", "NS", "B", "BS", "BOOL", "NULL", "L", "M"})

_TYPE_ORDER = ("S", "N", "B", "BOOL", "NULL", "L", "M", "SS", "NS", "BS")
_ORDERED_TYPES = frozenset({"S", "N", "B"})

_ARITY = {
    **{op: 1 for op in _COMPARATORS},
    "BETWEEN": 2,
    "NOT": 1,
    "attribute_exists": 0,
    "attribute_not_exists": 0,
    "attribute_type": 1,
    "begins_with": 1,
    "contains": 1,
    "size": 0,
}


@dataclass(frozen=True)
class Condition:
    """A predicate on a single attribute.

    ``op`` is a comparator (``=``, ``<>``, ``<``, ``<=``, ``>``, ``>=``), ``BETWEEN``,
    ``IN``, a function name, or one of ``NOT``/``AND``/``OR``. For the last three the
    operands are nested conditions applied to the same attribute; for all others
    they are operands resolved against the expression tables at render time.
    """

    op: str
    operands: tuple[Any, ...] = ()

    @staticmethod
    def from_value(value: Any) -> Condition:
        return value if isinstance(value, Condition) else Condition.eq(value)

    @staticmethod
    def eq(value: Any) -> Condition:
        return Condition(op="=", operands=(value,))

    @staticmethod
    def ne(value: Any) -> Condition:
        return Condition(op="<>", operands=(value,))

    @staticmethod
    def lt(value: Any) -> Condition:
        return Condition(op="<", operands=(value,))

    @staticmethod
    def lte(value: Any) -> Condition:
        return Condition(op="<=", operands=(value,))

    @staticmethod
    def gt(value: Any) -> Condition:
        return Condition(op=">", operands=(value,))

    @staticmethod
    def gte(value: Any) -> Condition:
        return Condition(op=">=", operands=(value,))

    @staticmethod
    def between(low: Any, high: Any) -> Condition:
        return Condition(op="BETWEEN", operands=(low, high))

    @staticmethod
    def in_(values: Sequence[Any]) -> Condition:
        if not isinstance(values, Sequence) or isinstance(values, (str, bytes, bytearray)):
            raise ValidationError("IN requires a sequence of values")
        if not values:
            raise ValidationError("IN requires at least one value")
        if len(values) > MaxInValues:
            raise ValidationError(f"IN supports maximum {MaxInValues} values")
        return Condition(op="IN", operands=tuple(values))

    @staticmethod
    def attribute_exists() -> Condition:
        return Condition(op="attribute_exists")

    @staticmethod
    def attribute_not_exists() -> Condition:
        return Condition(op="attribute_not_exists")

    @staticmethod
    def attribute_type(type_: AttributeType) -> Condition:
        if type_ not in ATTRIBUTE_TYPES:
            raise ValidationError(f"unsupported attribute type: {type_}")
        return Condition(op="attribute_type", operands=(type_,))

    @staticmethod
    def begins_with(prefix: Any) -> Condition:
        return Condition(op="begins_with", operands=(prefix,))

    @staticmethod
    def contains(value: Any) -> Condition:
        return Condition(op="contains", operands=(value,))

    @staticmethod
    def size() -> Condition:
        return Condition(op="size")

    @staticmethod
    def not_(condition: Any) -> Condition:
        return Condition(op="NOT", operands=(Condition.from_value(condition),))

    @staticmethod
    def and_(*conditions: Any) -> Condition:
        return _logical("AND", conditions)

    @staticmethod
    def or_(*conditions: Any) -> Condition:
        return _logical("OR", conditions)

    def evaluate(self, value: Any) -> bool:
        """Evaluate the condition against an in-memory attribute value.

        Pass ``MISSING`` for an absent attribute. Operands referring to other
        attributes are compared as plain strings.
        """
        op = self.op
        if op == "NOT":
            return not self.operands[0].evaluate(value)
        if op == "AND":
            return all(c.evaluate(value) for c in self.operands)
        if op == "OR":
            return any(c.evaluate(value) for c in self.operands)
        if op == "attribute_exists":
            return value is not MISSING
        if op == "attribute_not_exists":
            return value is MISSING
        if value is MISSING:
            return False

        if op == "=":
            return _equal(value, self.operands[0])
        if op == "<>":
            return not _equal(value, self.operands[0])
        if op in _COMPARATORS:
            return _compare(_COMPARATORS[op], value, self.operands[0])
        if op == "BETWEEN":
            low, high = self.operands
            return _compare(operator.ge, value, low) and _compare(operator.le, value, high)
        if op == "IN":
            return any(_equal(value, o) for o in self.operands)
        if op == "attribute_type":
            return _has_type(value, self.operands[0])
        if op == "begins_with":
            prefix = self.operands[0]
            if isinstance(value, str) and isinstance(prefix, str):
                return value.startswith(prefix)
            if _is_binary(value) and _is_binary(prefix):
                return bool(_plain(value).startswith(_plain(prefix)))
            return False
        if op == "contains":
            return _contains(value, self.operands[0])
        if op == "size":
            return _size(value) > 0

        raise UnrecognizedOperatorError(operator=op)

    def with_default_value(self, default: Any = MISSING) -> Condition:
        """Also match a missing attribute when ``default`` satisfies this condition."""
        if default is MISSING or not self.evaluate(default):
            return self
        return Condition.or_(self, Condition.attribute_not_exists())

    def to_json(self) -> dict[str, Any]:
        return {
            "op": self.op,
            "operands": [o.to_json() if isinstance(o, Condition) else o for o in self.operands],
        }

    @staticmethod
    def from_json(record: Any, *, depth: int = 0) -> Condition:
        if depth > MaxNestedDepth:
            raise ValidationError("condition nesting depth exceeds maximum")
        if not isinstance(record, Mapping):
            raise ValidationError("condition record must be a mapping")

        op = record.get("op")
        if not isinstance(op, str) or op not in OPERATORS:
            raise UnrecognizedOperatorError(operator=op)

        operands = record.get("operands", [])
        if not isinstance(operands, Sequence) or isinstance(operands, (str, bytes, bytearray)):
            raise ValidationError(f"{op} operands must be a list")

        expected = _ARITY.get(op)
        if expected is not None and len(operands) != expected:
            raise ValidationError(f"{op} requires {expected} operand(s)")

        if op == "NOT":
            return Condition(op=op, operands=(Condition.from_json(operands[0], depth=depth + 1),))
        if op in {"AND", "OR"}:
            return _logical(op, [Condition.from_json(o, depth=depth + 1) for o in operands])
        if op == "IN":
            return Condition.in_(list(operands))
        if op == "attribute_type":
            return Condition.attribute_type(operands[0])
        return Condition(op=op, operands=tuple(operands))


def _logical(op: LogicalOp, conditions: Sequence[Any]) -> Condition:
    if not conditions:
        raise ValidationError(f"{op} requires at least one condition")
    return Condition(op=op, operands=tuple(Condition.from_value(c) for c in conditions))


def _store_type(value: Any) -> str | None:
    for type_ in _TYPE_ORDER:
        if _has_type(value, type_):
            return type_
    return None


def _plain(value: Any) -> Any:
    if isinstance(value, Binary):
        return bytes(value.value)
    if isinstance(value, bytearray):
        return bytes(value)
    return value


def _equal(left: Any, right: Any) -> bool:
    type_ = _store_type(left)
    if type_ is None or type_ != _store_type(right):
        return False
    if type_ == "L":
        return len(left) == len(right) and all(_equal(a, b) for a, b in zip(left, right))
    if type_ == "M":
        return left.keys() == right.keys() and all(_equal(left[k], right[k]) for k in left)
    if type_ in {"SS", "NS", "BS"}:
        return len(left) == len(right) and all(any(_equal(a, b) for b in right) for a in left)
    return bool(_plain(left) == _plain(right))


def _compare(compare: Callable[[Any, Any], Any], left: Any, right: Any) -> bool:
    # only scalars of the same type are ordered
    type_ = _store_type(left)
    if type_ not in _ORDERED_TYPES or type_ != _store_type(right):
        return False
    return bool(compare(_plain(left), _plain(right)))


def _is_binary(value: Any) -> bool:
    return isinstance(value, (bytes, bytearray, Binary))


def _has_type(value: Any, type_: str) -> bool:
    if type_ == "S":
        return isinstance(value, str)
    if type_ == "N":
        return is_number(value)
    if type_ == "B":
        return _is_binary(value)
    if type_ == "BOOL":
        return isinstance(value, bool)
    if type_ == "NULL":
        return value is None
    if type_ == "L":
        return isinstance(value, (list, tuple))
    if type_ == "M":
        return isinstance(value, Mapping)
    if not isinstance(value, AbstractSet):
        return False
    if type_ == "SS":
        return all(isinstance(v, str) for v in value)
    if type_ == "NS":
        return all(is_number(v) for v in value)
    if type_ == "BS":
        return all(_is_binary(v) for v in value)
    return False


def _contains(value: Any, operand: Any) -> bool:
    if isinstance(value, str):
        return isinstance(operand, str) and operand in value
    if isinstance(value, AbstractSet) and isinstance(operand, AbstractSet):
        return any(_equal(v, o) for v in value for o in operand)
    if isinstance(value, (AbstractSet, list, tuple)):
        return any(_equal(v, operand) for v in value)
    return False


def _size(value: Any) -> int:
    if isinstance(value, (str, bytes, bytearray, list, tuple, Mapping, AbstractSet)):
        return len(value)
    if isinstance(value, Binary):
        return len(value.value)
    return 0


@dataclass(frozen=True)
class CompositeCondition:
    """An AND/OR combination of condition sets; each operand may itself be composite."""

    op: LogicalOp
    operands: tuple[Conditions, ...] = ()

    def and_(self, *operands: Conditions) -> CompositeCondition:
        return CompositeCondition(op="AND", operands=(self, *operands))

    def or_(self, *operands: Conditions) -> CompositeCondition:
        return CompositeCondition(op="OR", operands=(self, *operands))


class ConditionSet:
    @staticmethod
    def and_(*operands: Conditions) -> CompositeCondition:
        return CompositeCondition(op="AND", operands=tuple(operands))

    @staticmethod
    def or_(*operands: Conditions) -> CompositeCondition:
        return CompositeCondition(op="OR", operands=tuple(operands))


Conditions: TypeAlias = Mapping[str, Any] | CompositeCondition
