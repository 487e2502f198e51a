# src/atlas_services/core/schema/specs.py
"""
Tipos canônicos do schema de serviços.

Este módulo define as estruturas imutáveis produzidas pela DSL de
declaração e consumidas pelo engine e pelo tooling de introspecção:

    - SchemaKind      → enum dos tipos de declaração (arguments/outputs/steps)
    - FieldSpec       → argumento ou output (tipo, opcional, default, context)
    - StepSpec        → step (condição, always, âncora de inserção, callable)
    - SchemaOperation → registro de uma operação da DSL (add/remove/insert)
    - FieldAccessor   → descriptor gerado para leitura/escrita de campos

Invariantes:
    - Specs são frozen: redefinição cria nova instância, nunca muta a herdada
    - Operações são registradas na classe declarante e nunca reescritas
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional, Union

from atlas_services.core.types import TypeValidator


class _Missing:
    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Any = _Missing()

Condition = Union[str, Callable[[Any], Any], None]


class SchemaKind(str, Enum):
    ARGUMENTS = "arguments"
    OUTPUTS = "outputs"
    STEPS = "steps"

    @property
    def label(self) -> str:
        return {"arguments": "argument", "outputs": "output", "steps": "step"}[self.value]


class OperationAction(str, Enum):
    ADD = "add"
    INSERT = "insert"
    REMOVE = "remove"


@dataclass(frozen=True)
class FieldSpec:
    """
    Declaração efetiva de um argumento ou output.

    Campos:
    - name: identificador único dentro do conjunto efetivo do tipo
    - kind: ARGUMENTS ou OUTPUTS
    - validator: adaptador de tipo (None quando o campo é isento de tipo)
    - optional: ausência/None aceitos na validação
    - default: valor estático (copiado por invocação) ou callable(servico)
    - context: (apenas argumentos) propagado para invocações aninhadas
    - declared_by: nome qualificado da classe declarante
    """

    name: str
    kind: SchemaKind
    validator: Optional[TypeValidator] = None
    optional: bool = False
    default: Any = MISSING
    context: bool = False
    declared_by: str = ""

    @property
    def has_default(self) -> bool:
        return self.default is not MISSING

    def describe(self) -> dict:
        return {
            "name": self.name,
            "type": self.validator.describe() if self.validator is not None else None,
            "optional": self.optional,
            "has_default": self.has_default,
            "context": self.context,
            "declared_by": self.declared_by,
        }


@dataclass(frozen=True)
class StepSpec:
    """
    Declaração efetiva de um step.

    `func` é o callable resolvido na compilação do mapa efetivo da classe
    (uma vez por classe); é chamado como `func(instancia)`. Com `explicit`,
    o callable veio de `func=` e não é trocado por métodos homônimos.
    """

    name: str
    func: Optional[Callable[[Any], Any]] = None
    if_: Condition = None
    unless: Condition = None
    always: bool = False
    before: Optional[str] = None
    after: Optional[str] = None
    declared_by: str = ""
    explicit: bool = False

    def selected(self, instance: Any) -> bool:
        if self.if_ is not None:
            return bool(_check_condition(self.if_, instance))
        if self.unless is not None:
            return not _check_condition(self.unless, instance)
        return True

    def describe(self) -> dict:
        return {
            "name": self.name,
            "if": _describe_condition(self.if_),
            "unless": _describe_condition(self.unless),
            "always": self.always,
            "declared_by": self.declared_by,
        }


def _check_condition(condition: Condition, instance: Any) -> Any:
    if isinstance(condition, str):
        # condição com nome de campo usa o valor do campo como predicado
        if isinstance(getattr(type(instance), condition, None), FieldAccessor):
            return getattr(instance, condition)
        return getattr(instance, condition)()
    return condition(instance)


def _describe_condition(condition: Condition) -> Optional[str]:
    if condition is None or isinstance(condition, str):
        return condition
    return getattr(condition, "__name__", "<callable>")


@dataclass(frozen=True)
class SchemaOperation:
    action: OperationAction
    name: str
    spec: Union[FieldSpec, StepSpec, None] = None
    before: Optional[str] = None
    after: Optional[str] = None

    @property
    def anchor(self) -> Optional[str]:
        return self.before or self.after


class FieldAccessor:
    """Descriptor de leitura/escrita de um campo na coleção da invocação."""

    def __init__(self, kind: SchemaKind, name: str):
        self.kind = kind
        self.name = name

    def __get__(self, instance: Any, owner: Any = None) -> Any:
        if instance is None:
            return self
        return getattr(instance, self.kind.value).get(self.name)

    def __set__(self, instance: Any, value: Any) -> None:
        getattr(instance, self.kind.value).set(self.name, value)

    def __repr__(self) -> str:
        return f"FieldAccessor({self.kind.label}:{self.name})"
