from __future__ import annotations

from decimal import Decimal

import pytest

from ddbexpr_py import MaxExpressionLength, MaxNestedDepth, ValidationError, split_path
from ddbexpr_py.validation import PathSegment, is_number, validate_expression


def test_split_path_valid_values() -> None:
    assert split_path("a") == [PathSegment(key="a")]
    assert split_path("a.b[0]") == [PathSegment(key="a"), PathSegment(key="b", indexes="[0]")]
    assert split_path("list[1][22].x") == [PathSegment(key="list", indexes="[1][22]"), PathSegment(key="x")]
    assert split_path("weird-name") == [PathSegment(key="weird-name")]
    assert split_path("#foo") == [PathSegment(key="#foo")]


def test_split_path_rejects_empty_path_and_segments() -> None:
    with pytest.raises(ValidationError, match="attribute path cannot be empty"):
        split_path("")

    for path in ["a..b", ".a", "a.", "[0]"]:
        with pytest.raises(ValidationError, match="invalid attribute path segment"):
            split_path(path)


def test_split_path_rejects_malformed_indexes() -> None:
    for path in ["a[x]", "a[1", "a[1]b", "a[]"]:
        with pytest.raises(ValidationError, match="invalid list index"):
            split_path(path)


def test_split_path_rejects_too_deep() -> None:
    split_path(".".join(["a"] * MaxNestedDepth))
    with pytest.raises(ValidationError, match="depth exceeds maximum"):
        split_path(".".join(["a"] * (MaxNestedDepth + 1)))


def test_validate_expression() -> None:
    validate_expression("attribute_exists(#a) AND #b = :b")
    validate_expression("a" * MaxExpressionLength)

    with pytest.raises(ValidationError, match="expression exceeds maximum length"):
        validate_expression("a" * (MaxExpressionLength + 1))


def test_is_number() -> None:
    assert is_number(1)
    assert is_number(1.5)
    assert is_number(Decimal("2"))
    assert not is_number(True)
    assert not is_number("1")
