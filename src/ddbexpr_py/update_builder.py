from __future__ import annotations

import logging
from collections.abc import Mapping, MutableMapping
from typing import Any, TypeAlias

from .errors import EmptyExpressionError, ValidationError
from .operand import OperandRole
from .symbols import SymbolTable, path_token
from .update import ACTION_KINDS, ActionKind, SetValue, UpdateAction
from .validation import validate_expression

logger = logging.getLogger(__name__)

UpdateAttributes: TypeAlias = Mapping[str, Any]

_SET_VALUE_ROLES = {"+": "plus", "-": "minus", "list_append": "append"}


class UpdateExpressionBuilder:
    value_prefix = "val_"

    def __init__(self, params: MutableMapping[str, Any] | None = None) -> None:
        self.symbols = SymbolTable(params, value_prefix=self.value_prefix)
        self._actions: dict[ActionKind, list[str]] = {kind: [] for kind in ACTION_KINDS}

    @property
    def params(self) -> MutableMapping[str, Any]:
        return self.symbols.params

    def build(self, attributes: UpdateAttributes) -> str | None:
        if not isinstance(attributes, Mapping):
            raise ValidationError("update attributes must be a mapping")

        self._actions = {kind: [] for kind in ACTION_KINDS}

        for path, value in attributes.items():
            self.add_update(str(path), UpdateAction.from_value(value))

        expression = " ".join(
            f"{kind} " + ", ".join(items) for kind, items in self._actions.items() if items
        )
        logger.debug("rendered update expression: %r", expression)
        return expression or None

    def add_action(self, kind: ActionKind, action: str) -> None:
        self._actions[kind].append(action)

    def add_update(self, path: str, action: UpdateAction) -> None:
        name = self.symbols.resolve(path, "name")
        token = path_token(path)

        if action.kind == "SET":
            self.add_action("SET", f"{name} = {self._render_set_value(token, action.value)}")
            return

        if action.kind == "REMOVE":
            self.add_action("REMOVE", name)
            return

        if action.kind in {"ADD", "DELETE"}:
            value = self.symbols.resolve(action.value, "value", f"{token}_{action.kind.lower()}")
            self.add_action(action.kind, f"{name} {value}")
            return

        raise ValidationError(f"unsupported update action: {action.kind}")

    def _render_set_value(self, token: str, node: SetValue) -> str:
        if node.op == "value":
            return self.symbols.resolve(node.operands[0], "value", token)

        if node.op == "if_not_exists":
            path, default = node.operands
            operands = [
                self.symbols.resolve(path, "name"),
                self._render_operand(default, "value", f"{token}_if_not_exists"),
            ]
            return "if_not_exists(" + ", ".join(operands) + ")"

        role = _SET_VALUE_ROLES.get(node.op)
        if role is None:
            raise ValidationError(f"unsupported set value operation: {node.op}")

        operands = [
            self._render_operand(operand, "name" if isinstance(operand, str) else "value", f"{token}_{role}{i}")
            for i, operand in enumerate(node.operands)
        ]
        if node.op == "list_append":
            return "list_append(" + ", ".join(operands) + ")"
        return f" {node.op} ".join(operands)

    def _render_operand(self, operand: Any, default_role: OperandRole, prefix: str) -> str:
        if isinstance(operand, SetValue):
            return self._render_set_value(prefix, operand)
        return self.symbols.resolve(operand, default_role, prefix)


def build_update_expression(attributes: UpdateAttributes, params: MutableMapping[str, Any]) -> str | None:
    """Render ``attributes`` into ``params`` and return the expression, or None if there are no actions."""
    return UpdateExpressionBuilder(params).build(attributes)


def build_update_params(
    attributes: UpdateAttributes,
    *,
    params: MutableMapping[str, Any] | None = None,
) -> MutableMapping[str, Any]:
    """Build ``UpdateExpression`` params, merged into ``params`` when given."""
    out: MutableMapping[str, Any] = params if params is not None else {}
    expression = build_update_expression(attributes, out)
    if not expression:
        raise EmptyExpressionError(kind="update expression")
    validate_expression(expression)
    out["UpdateExpression"] = expression
    return out
