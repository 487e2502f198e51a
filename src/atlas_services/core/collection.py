# src/atlas_services/core/collection.py
"""
Armazenamento tipado de argumentos e outputs de uma invocação.

Cada invocação possui duas `TypedCollection` (arguments e outputs), apoiadas
nas `FieldSpec` efetivas da classe do serviço. Valores nunca vazam entre
invocações, exceto por propagação explícita de contexto.

Ciclo de uso:
    1. `load_defaults()`: preenche campos ausentes com seus defaults
    2. `validate()`: aplica o adaptador de tipo de cada campo
"""

from __future__ import annotations

from copy import deepcopy
from inspect import Parameter, signature
from typing import Any, Dict, Iterator, Mapping

from atlas_services.core.exceptions import ArgumentTypeError, OutputTypeError
from atlas_services.core.schema.specs import FieldSpec, SchemaKind
from atlas_services.core.types import TypeMismatch


class TypedCollection:
    def __init__(self, instance: Any, kind: SchemaKind, specs: Mapping[str, FieldSpec], storage: Any = None):
        if kind is SchemaKind.STEPS:
            raise ValueError("collection kind must be arguments or outputs")

        if storage is None:
            storage = {}
        if not isinstance(storage, dict):
            raise ArgumentTypeError(
                f"{type(instance).__name__} - {kind.value} must be a dict",
                details={"service": type(instance).__name__, "received": type(storage).__name__},
            )

        self._instance = instance
        self.kind = kind
        self.specs = specs
        self._storage: Dict[str, Any] = storage

    # -----------------------------
    # Acesso
    # -----------------------------
    def get(self, name: str, default: Any = None) -> Any:
        return self._storage.get(name, default)

    def set(self, name: str, value: Any) -> None:
        self._storage[name] = value

    def __getitem__(self, name: str) -> Any:
        return self._storage.get(name)

    def __setitem__(self, name: str, value: Any) -> None:
        self.set(name, value)

    def __contains__(self, name: object) -> bool:
        return name in self._storage

    def __iter__(self) -> Iterator[str]:
        return iter(self._storage)

    def __len__(self) -> int:
        return len(self._storage)

    def to_dict(self) -> Dict[str, Any]:
        return dict(self._storage)

    # -----------------------------
    # Defaults & validação
    # -----------------------------
    def load_defaults(self) -> None:
        for name, spec in self.specs.items():
            if not spec.has_default or name in self._storage:
                continue

            if callable(spec.default):
                self.set(name, _call_default(spec.default, self._instance))
            else:
                self.set(name, deepcopy(spec.default))

    def validate(self) -> None:
        for name, spec in self.specs.items():
            value = self._storage.get(name)
            if spec.optional and value is None:
                continue
            if spec.validator is None:
                continue

            try:
                accepted = spec.validator.validate(value)
            except TypeMismatch as e:
                raise self._type_error(spec, value, e) from e

            if accepted is not value:
                self.set(name, accepted)

    def extend_with_context(self, target: Dict[str, Any]) -> Dict[str, Any]:
        """Copia argumentos marcados como `context` ausentes em `target`."""
        if self.kind is not SchemaKind.ARGUMENTS:
            return target

        for name, spec in self.specs.items():
            if not spec.context or name in target or name not in self._storage:
                continue
            target[name] = self._storage[name]

        return target

    def _type_error(self, spec: FieldSpec, value: Any, mismatch: TypeMismatch) -> Exception:
        service = type(self._instance).__name__
        error_cls = ArgumentTypeError if self.kind is SchemaKind.ARGUMENTS else OutputTypeError
        message = (
            f"{service} {spec.kind.label} `{spec.name}` must be {mismatch.expected}, "
            f"but got {type(value).__name__} with value: {value!r}"
        )
        if mismatch.reason:
            message = f"{message} ({mismatch.reason})"

        return error_cls(
            message,
            details={
                "service": service,
                "declared_by": spec.declared_by,
                "field": spec.name,
                "expected": mismatch.expected,
                "actual_type": type(value).__name__,
                "value": repr(value),
            },
        )


def _call_default(factory: Any, instance: Any) -> Any:
    """
    Chama um default gerador.

    Geradores sem parâmetros obrigatórios (`list`, `dict`, `lambda: ...`)
    são chamados sem argumentos; os demais recebem a instância do serviço.
    """
    try:
        params = signature(factory).parameters.values()
    except (TypeError, ValueError):
        # builtins sem assinatura introspectável
        return factory()

    required = [
        p
        for p in params
        if p.default is Parameter.empty and p.kind in (Parameter.POSITIONAL_ONLY, Parameter.POSITIONAL_OR_KEYWORD)
    ]
    if required:
        return factory(instance)
    return factory()
