# src/atlas_services/core/types.py
"""
Adaptadores de validação de tipo para argumentos e outputs.

Contrato de um adaptador:
    - `validate(value)` retorna o valor aceito (possivelmente coagido)
    - `describe()` retorna a descrição textual do tipo esperado
    - rejeição levanta `TypeMismatch`

Backends disponíveis:
    - InstanceOf → igualdade estrita de tipo via isinstance (bool não conta como int)
    - AnyOf      → união de adaptadores (primeiro que aceita vence)
    - Nilable    → aceita None, delega o resto
    - OneOf      → valores enumerados
    - Coerce     → pydantic TypeAdapter (lax coage, strict apenas restringe)

`TypedCollection` converte `TypeMismatch` em ArgumentTypeError/OutputTypeError
com o contexto do serviço e do campo.
"""

from __future__ import annotations

import typing
from typing import Any, Optional, Protocol, Tuple, runtime_checkable

from pydantic import TypeAdapter, ValidationError


class TypeMismatch(Exception):
    """Rejeição de um valor por um adaptador."""

    def __init__(self, expected: str, value: Any, reason: Optional[str] = None):
        self.expected = expected
        self.value = value
        self.reason = reason
        super().__init__(reason or f"expected {expected}, got {type(value).__name__}")


@runtime_checkable
class TypeValidator(Protocol):
    def validate(self, value: Any) -> Any:
        ...

    def describe(self) -> str:
        ...


def _type_name(tp: Any) -> str:
    return getattr(tp, "__name__", None) or repr(tp)


class InstanceOf:
    def __init__(self, tp: type):
        self.tp = tp

    def validate(self, value: Any) -> Any:
        # bool é subclasse de int, mas não é aceito como inteiro
        if isinstance(value, bool) and self.tp is not bool and issubclass(self.tp, int):
            raise TypeMismatch(self.describe(), value)
        if not isinstance(value, self.tp):
            raise TypeMismatch(self.describe(), value)
        return value

    def describe(self) -> str:
        return _type_name(self.tp)

    def __repr__(self) -> str:
        return f"InstanceOf({self.describe()})"


class AnyOf:
    def __init__(self, *validators: Any):
        self.validators: Tuple[TypeValidator, ...] = tuple(
            v for v in (as_validator(spec) for spec in validators) if v is not None
        )

    def validate(self, value: Any) -> Any:
        for validator in self.validators:
            try:
                return validator.validate(value)
            except TypeMismatch:
                continue
        raise TypeMismatch(self.describe(), value)

    def describe(self) -> str:
        return " | ".join(v.describe() for v in self.validators)

    def __repr__(self) -> str:
        return f"AnyOf({self.describe()})"


class Nilable:
    def __init__(self, inner: Any):
        self.inner: TypeValidator = as_validator(inner)

    def validate(self, value: Any) -> Any:
        if value is None:
            return None
        return self.inner.validate(value)

    def describe(self) -> str:
        return f"None | {self.inner.describe()}"


class OneOf:
    def __init__(self, *values: Any):
        self.values = tuple(values)

    def validate(self, value: Any) -> Any:
        if value not in self.values:
            raise TypeMismatch(self.describe(), value)
        return value

    def describe(self) -> str:
        return "one of (" + ", ".join(repr(v) for v in self.values) + ")"


class Coerce:
    """
    Validação via pydantic.

    Em modo lax (padrão) o valor armazenado é substituído pelo valor coagido
    (ex.: "25" → 25 para `int`). Com `strict=True` nenhuma coerção é feita,
    mas restrições do tipo (ex.: `Annotated[int, Field(gt=0)]`) continuam valendo.
    """

    def __init__(self, tp: Any, *, strict: bool = False):
        self.tp = tp
        self.strict = strict
        self._adapter = TypeAdapter(tp)

    def validate(self, value: Any) -> Any:
        try:
            return self._adapter.validate_python(value, strict=self.strict)
        except ValidationError as e:
            errors = e.errors()
            reason = errors[0]["msg"] if errors else str(e)
            raise TypeMismatch(self.describe(), value, reason) from e

    def describe(self) -> str:
        origin = typing.get_origin(self.tp)
        if origin is None:
            return _type_name(self.tp)
        return repr(self.tp).replace("typing.", "")

    def __repr__(self) -> str:
        return f"Coerce({self.describe()}, strict={self.strict})"


def as_validator(spec: Any) -> Optional[TypeValidator]:
    """
    Normaliza uma declaração de tipo em um adaptador.

    - None                 → sem validação
    - adaptador            → ele mesmo
    - classe simples       → InstanceOf
    - tuple/list de specs  → AnyOf
    - anotação de typing   → Coerce(strict=True)
    """
    if spec is None:
        return None
    if isinstance(spec, (tuple, list)):
        return AnyOf(*spec)
    if typing.get_origin(spec) is None and isinstance(spec, type):
        return InstanceOf(spec)
    if isinstance(spec, TypeValidator):
        return spec
    return Coerce(spec, strict=True)
