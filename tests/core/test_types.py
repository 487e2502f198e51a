# tests/core/test_types.py
"""
Testes dos adaptadores de validação de tipo.

Contrato verificado:
    - `validate(value)` retorna o valor aceito (possivelmente coagido)
    - rejeição levanta `TypeMismatch` com a descrição do tipo esperado
"""

from typing import Annotated, List, Optional

import pytest
from pydantic import Field

from atlas_services.core.types import (
    AnyOf,
    Coerce,
    InstanceOf,
    Nilable,
    OneOf,
    TypeMismatch,
    TypeValidator,
    as_validator,
)


def test_instance_of_is_strict():
    validator = InstanceOf(int)

    assert validator.validate(3) == 3
    with pytest.raises(TypeMismatch) as exc:
        validator.validate("3")
    assert exc.value.expected == "int"


def test_instance_of_rejects_bool_for_int():
    with pytest.raises(TypeMismatch):
        InstanceOf(int).validate(True)

    assert InstanceOf(bool).validate(True) is True


def test_any_of_accepts_first_matching():
    validator = AnyOf(str, int)

    assert validator.validate("a") == "a"
    assert validator.validate(1) == 1
    assert validator.describe() == "str | int"
    with pytest.raises(TypeMismatch):
        validator.validate(1.5)


def test_nilable_accepts_none():
    validator = Nilable(str)

    assert validator.validate(None) is None
    assert validator.validate("x") == "x"
    with pytest.raises(TypeMismatch):
        validator.validate(1)


def test_one_of_enumerated_values():
    validator = OneOf("draft", "published")

    assert validator.validate("draft") == "draft"
    with pytest.raises(TypeMismatch):
        validator.validate("archived")


def test_coerce_lax_converts_value():
    validator = Coerce(int)

    assert validator.validate("25") == 25
    with pytest.raises(TypeMismatch) as exc:
        validator.validate("twenty")
    assert exc.value.reason


def test_coerce_strict_keeps_constraints_without_coercion():
    validator = Coerce(Annotated[int, Field(gt=0)], strict=True)

    assert validator.validate(5) == 5
    with pytest.raises(TypeMismatch):
        validator.validate("5")
    with pytest.raises(TypeMismatch):
        validator.validate(-1)


def test_as_validator_normalization():
    assert as_validator(None) is None
    assert isinstance(as_validator(int), InstanceOf)
    assert isinstance(as_validator((int, str)), AnyOf)
    assert isinstance(as_validator([int, str]), AnyOf)

    adapter = OneOf(1, 2)
    assert as_validator(adapter) is adapter

    typed = as_validator(List[int])
    assert isinstance(typed, Coerce) and typed.strict is True
    assert typed.validate([1, 2]) == [1, 2]

    optional = as_validator(Optional[str])
    assert optional.validate(None) is None


def test_adapters_satisfy_protocol():
    for adapter in (InstanceOf(int), AnyOf(int), Nilable(int), OneOf(1), Coerce(int)):
        assert isinstance(adapter, TypeValidator)
