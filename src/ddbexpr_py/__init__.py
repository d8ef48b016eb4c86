from __future__ import annotations

import json
import re
from importlib.resources import files
from typing import TYPE_CHECKING, Any

from .condition import (
    MISSING,
    AttributeType,
    CompositeCondition,
    Condition,
    Conditions,
    ConditionSet,
    LogicalOp,
)
from .condition_builder import (
    ConditionExpressionBuilder,
    build_condition_expression,
    build_condition_params,
    build_filter_params,
    build_key_condition_params,
)
from .errors import DdbExprError, EmptyExpressionError, UnrecognizedOperatorError, ValidationError
from .operand import Operand, ParsedOperand, parse_operand
from .symbols import NAMES_KEY, VALUES_KEY, SymbolTable
from .update import ActionKind, SetValue, UpdateAction
from .update_builder import (
    UpdateAttributes,
    UpdateExpressionBuilder,
    build_update_expression,
    build_update_params,
)

if TYPE_CHECKING:
    from .validation import MaxExpressionLength, MaxInValues, MaxNestedDepth, split_path, validate_expression
    from .wire import to_client_params


def _read_repo_version() -> str:
    try:
        data = json.loads(files(__package__).joinpath("version.json").read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return "0.0.0"

    version = data.get("version")
    return version if isinstance(version, str) and version else "0.0.0"


def _normalize_repo_version(repo_version: str) -> str:
    match = re.match(r"^(\d+\.\d+\.\d+)-rc\.?([0-9]+)$", repo_version)
    if match:
        return f"{match.group(1)}rc{match.group(2)}"
    return repo_version


__repo_version__ = _read_repo_version()
__version__ = _normalize_repo_version(__repo_version__)


def __getattr__(name: str) -> Any:
    if name == "to_client_params":
        from .wire import to_client_params

        return to_client_params
    if name in {
        "MaxExpressionLength",
        "MaxInValues",
        "MaxNestedDepth",
        "split_path",
        "validate_expression",
    }:
        from . import validation

        return getattr(validation, name)
    raise AttributeError(name)


__all__ = [
    "ActionKind",
    "AttributeType",
    "build_condition_expression",
    "build_condition_params",
    "build_filter_params",
    "build_key_condition_params",
    "build_update_expression",
    "build_update_params",
    "CompositeCondition",
    "Condition",
    "ConditionExpressionBuilder",
    "Conditions",
    "ConditionSet",
    "DdbExprError",
    "EmptyExpressionError",
    "LogicalOp",
    "MaxExpressionLength",
    "MaxInValues",
    "MaxNestedDepth",
    "MISSING",
    "NAMES_KEY",
    "Operand",
    "parse_operand",
    "ParsedOperand",
    "SetValue",
    "split_path",
    "SymbolTable",
    "to_client_params",
    "UnrecognizedOperatorError",
    "UpdateAction",
    "UpdateAttributes",
    "UpdateExpressionBuilder",
    "validate_expression",
    "ValidationError",
    "VALUES_KEY",
    "__repo_version__",
    "__version__",
]
