from __future__ import annotations


class DdbExprError(Exception):
    pass


class ValidationError(DdbExprError):
    pass


class EmptyExpressionError(ValidationError):
    def __init__(self, *, kind: str) -> None:
        super().__init__(f"cannot build {kind} for empty input")
        self.kind = kind


class UnrecognizedOperatorError(ValidationError):
    def __init__(self, *, operator: object) -> None:
        super().__init__(f"unrecognized condition operator: {operator!r}")
        self.operator = operator
