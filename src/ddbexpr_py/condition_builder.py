from __future__ import annotations

import logging
from collections.abc import Mapping, MutableMapping
from typing import Any

from .condition import FUNCTIONS, CompositeCondition, Condition, Conditions
from .errors import EmptyExpressionError, UnrecognizedOperatorError, ValidationError
from .symbols import SymbolTable, path_token
from .validation import validate_expression

logger = logging.getLogger(__name__)


def _join(parts: list[str], op: str) -> str:
    if len(parts) == 1:
        return parts[0]
    if not parts:
        return ""
    return "(" + f" {op} ".join(parts) + ")"


class ConditionExpressionBuilder:
    """Render condition sets into a condition, key condition or filter expression.

    Several builders (including update builders) may share one ``params`` mapping
    to accumulate a single set of expression attribute names and values.
    """

    value_prefix = "cond_"

    def __init__(self, params: MutableMapping[str, Any] | None = None) -> None:
        self.symbols = SymbolTable(params, value_prefix=self.value_prefix)

    @property
    def params(self) -> MutableMapping[str, Any]:
        return self.symbols.params

    def build(self, conditions: Conditions) -> str | None:
        expression = self._render_set(conditions)
        logger.debug("rendered condition expression: %r", expression)
        return expression or None

    def _render_set(self, conditions: Conditions) -> str:
        if isinstance(conditions, CompositeCondition):
            parts = [self._render_set(operand) for operand in conditions.operands]
            return _join([p for p in parts if p], conditions.op)

        if not isinstance(conditions, Mapping):
            raise ValidationError("conditions must be a mapping or a composite condition")

        parts = []
        for path, value in conditions.items():
            parts.append(self.render(str(path), Condition.from_value(value)))
        return " AND ".join(parts)

    def render(self, path: str, condition: Condition) -> str:
        """Render one condition against the attribute at ``path``."""
        op = condition.op
        operands = condition.operands
        token = path_token(path)

        if op == "NOT":
            inner = operands[0]
            rendered = self.render(path, inner)
            if inner.op in {"AND", "OR"} and len(inner.operands) > 1:
                return f"NOT {rendered}"
            return f"NOT ({rendered})"
        if op in {"AND", "OR"}:
            return _join([self.render(path, c) for c in operands], op)

        name = self.symbols.resolve(path, "name")
        if op in {"=", "<>", "<", "<=", ">", ">="}:
            return f"{name} {op} {self.symbols.resolve(operands[0], 'value', token)}"
        if op == "BETWEEN":
            low, high = (self.symbols.resolve(o, "value", f"{token}_between{i}") for i, o in enumerate(operands))
            return f"{name} BETWEEN {low} AND {high}"
        if op == "IN":
            refs = [self.symbols.resolve(o, "value", f"{token}_in{i}") for i, o in enumerate(operands)]
            return f"{name} IN (" + ", ".join(refs) + ")"
        if op in FUNCTIONS:
            args = [self.symbols.resolve(o, "value", f"{token}_{op}_arg{i}") for i, o in enumerate(operands)]
            return f"{op}(" + ", ".join([name, *args]) + ")"

        raise UnrecognizedOperatorError(operator=op)


def build_condition_expression(conditions: Conditions, params: MutableMapping[str, Any]) -> str | None:
    """Render ``conditions`` into ``params`` and return the expression, or None if empty."""
    return ConditionExpressionBuilder(params).build(conditions)


def _build_params(
    expression_key: str,
    kind: str,
    conditions: Conditions,
    params: MutableMapping[str, Any] | None,
) -> MutableMapping[str, Any]:
    out: MutableMapping[str, Any] = params if params is not None else {}
    expression = build_condition_expression(conditions, out)
    if not expression:
        raise EmptyExpressionError(kind=kind)
    validate_expression(expression)
    out[expression_key] = expression
    return out


def build_condition_params(
    conditions: Conditions,
    *,
    params: MutableMapping[str, Any] | None = None,
) -> MutableMapping[str, Any]:
    """Build ``ConditionExpression`` params, merged into ``params`` when given."""
    return _build_params("ConditionExpression", "condition expression", conditions, params)


def build_key_condition_params(
    conditions: Conditions,
    *,
    params: MutableMapping[str, Any] | None = None,
) -> MutableMapping[str, Any]:
    """Build ``KeyConditionExpression`` params for a query, merged into ``params`` when given."""
    return _build_params("KeyConditionExpression", "key condition expression", conditions, params)


def build_filter_params(
    conditions: Conditions,
    *,
    params: MutableMapping[str, Any] | None = None,
) -> MutableMapping[str, Any]:
    """Build ``FilterExpression`` params for a query or scan, merged into ``params`` when given."""
    return _build_params("FilterExpression", "filter expression", conditions, params)
