from __future__ import annotations

from collections.abc import Mapping
from collections.abc import Set as AbstractSet
from decimal import Decimal
from typing import Any

from boto3.dynamodb.types import TypeSerializer

from .errors import ValidationError
from .symbols import VALUES_KEY

_serializer = TypeSerializer()


def _to_dynamodb_number(value: Any) -> Any:
    if isinstance(value, float):
        return Decimal(str(value))
    if isinstance(value, Mapping):
        return {k: _to_dynamodb_number(v) for k, v in value.items()}
    if isinstance(value, AbstractSet):
        return {_to_dynamodb_number(v) for v in value}
    if isinstance(value, (list, tuple)):
        return [_to_dynamodb_number(v) for v in value]
    return value


def to_client_params(params: Mapping[str, Any]) -> dict[str, Any]:
    """Copy ``params`` for the low-level DynamoDB client.

    Expression attribute values are converted to the attribute value wire form
    (``{"S": "x"}``, ``{"N": "1"}``, ...); every other key is copied unchanged.
    """
    out = dict(params)
    values = params.get(VALUES_KEY)
    if values is None:
        return out

    serialized: dict[str, Any] = {}
    for ref, value in values.items():
        try:
            serialized[ref] = _serializer.serialize(_to_dynamodb_number(value))
        except TypeError as err:
            raise ValidationError(f"unsupported value for {ref}: {err}") from err
    out[VALUES_KEY] = serialized
    return out
