# src/atlas_services/core/schema/definition.py
"""
Compilação do schema de um serviço (SchemaRegistry).

Cada classe de serviço possui um `ServiceDefinition` próprio, que guarda:
    - a lista ordenada de operações da DSL declaradas na própria classe,
      por tipo (arguments/outputs/steps)
    - o mapa efetivo memoizado por tipo
    - a configuração de classe e o registry de callbacks

O mapa efetivo de um tipo é obtido por:
    (a) mapa efetivo do pai (ou vazio)
    (b) cópia rasa
    (c) replay das operações da própria classe em ordem de declaração

Decisões arquiteturais:
    - Operações são validadas no registro (fail fast)
    - Redefinição de um nome herdado substitui a spec por completo,
      mantendo a posição original
    - Âncoras `before`/`after` são resolvidas contra o mapa efetivo no
      momento da declaração
    - O callable de cada step é resolvido uma vez por classe, no cálculo do
      mapa efetivo
    - Remover um nome inexistente é no-op

Invariantes:
    - O mapa efetivo retornado é somente leitura
    - Calcular o mapa de uma subclasse nunca muta o cache da classe pai
    - Registrar uma operação invalida o cache da classe e de suas subclasses
"""

from __future__ import annotations

from dataclasses import replace
from types import MappingProxyType
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from atlas_services.core.callbacks import CallbackRegistry
from atlas_services.core.config import config as process_config
from atlas_services.core.exceptions import (
    AnchorNotFoundError,
    ConditionConflictError,
    DefinitionError,
    DuplicateNameError,
    NameConflictError,
    StepLookupError,
)
from atlas_services.core.types import as_validator

from .specs import (
    MISSING,
    Condition,
    FieldAccessor,
    FieldSpec,
    OperationAction,
    SchemaKind,
    SchemaOperation,
    StepSpec,
)
from .validation import validate_name, validate_type_required

Spec = Union[FieldSpec, StepSpec]

DEFINITION_ATTR = "__service_definition__"


def definition_of(owner: type) -> Optional["ServiceDefinition"]:
    return owner.__dict__.get(DEFINITION_ATTR)


class ServiceDefinition:
    """Schema compilado de uma classe de serviço."""

    def __init__(self, owner: type):
        self.owner = owner
        self.parent: Optional[ServiceDefinition] = None
        for base in owner.__mro__[1:]:
            found = definition_of(base)
            if found is not None:
                self.parent = found
                break

        self.operations: Dict[SchemaKind, List[SchemaOperation]] = {kind: [] for kind in SchemaKind}
        self.class_config: Dict[str, Any] = {}
        self.callbacks = CallbackRegistry(self.parent.callbacks if self.parent else None)
        self._effective: Dict[SchemaKind, Mapping[str, Spec]] = {}

    @property
    def owner_name(self) -> str:
        return f"{self.owner.__module__}.{self.owner.__qualname__}"

    # ------------------------------------------------------------------
    # Operações da DSL
    # ------------------------------------------------------------------

    def add_field(
        self,
        kind: SchemaKind,
        name: str,
        *,
        type: Any = MISSING,
        optional: bool = False,
        default: Any = MISSING,
        context: bool = False,
    ) -> FieldSpec:
        if kind is SchemaKind.STEPS:
            raise DefinitionError("Use add_step to declare steps")

        self._validate_new_name(kind, name)

        config_key = "require_arg_type" if kind is SchemaKind.ARGUMENTS else "require_output_type"
        validate_type_required(
            name,
            kind,
            self.owner_name,
            has_type=type is not MISSING,
            required=bool(self.resolve_config().get(config_key)),
        )

        if context and kind is not SchemaKind.ARGUMENTS:
            raise DefinitionError(
                f"Only arguments can be marked as context (`{name}` in {self.owner_name})",
                details={"owner": self.owner_name, "name": name},
            )

        spec = FieldSpec(
            name=name,
            kind=kind,
            validator=as_validator(None if type is MISSING else type),
            optional=bool(optional),
            default=default,
            context=bool(context),
            declared_by=self.owner_name,
        )
        self._register(kind, SchemaOperation(OperationAction.ADD, name, spec))

        if not isinstance(self.owner.__dict__.get(name), FieldAccessor):
            setattr(self.owner, name, FieldAccessor(kind, name))

        return spec

    def add_step(
        self,
        name: str,
        *,
        func: Optional[Callable[[Any], Any]] = None,
        if_: Condition = None,
        unless: Condition = None,
        always: bool = False,
        before: Optional[str] = None,
        after: Optional[str] = None,
    ) -> StepSpec:
        self._validate_new_name(SchemaKind.STEPS, name)

        if if_ is not None and unless is not None:
            raise ConditionConflictError(
                f"{self.owner_name} `if_` and `unless` cannot be specified "
                f"for the step `{name}` at the same time",
                details={"owner": self.owner_name, "step": name},
            )

        if before is not None and after is not None:
            raise DefinitionError(
                f"You cannot specify `before` and `after` for step `{name}` "
                f"in service {self.owner_name} at the same time",
                details={"owner": self.owner_name, "step": name},
            )

        anchor = before or after
        if anchor is not None:
            current = self.effective(SchemaKind.STEPS)
            if anchor not in current:
                raise AnchorNotFoundError(
                    f"Cannot find target step `{anchor}` in service {self.owner_name}. "
                    f"Available steps: [{', '.join(current)}]",
                    details={"owner": self.owner_name, "step": name, "anchor": anchor},
                )

        resolved = func if func is not None else getattr(self.owner, name, None)
        if not callable(resolved):
            raise StepLookupError(
                f"Step method `{name}` is not defined in {self.owner_name}",
                details={"owner": self.owner_name, "step": name},
                hint="Define a method with the step name or decorate it with @step",
            )

        spec = StepSpec(
            name=name,
            func=resolved,
            if_=if_,
            unless=unless,
            always=bool(always),
            before=before,
            after=after,
            declared_by=self.owner_name,
            explicit=func is not None and func is not self.owner.__dict__.get(name),
        )
        action = OperationAction.INSERT if anchor is not None else OperationAction.ADD
        self._register(
            SchemaKind.STEPS,
            SchemaOperation(action, name, spec, before=before, after=after),
        )
        return spec

    def remove(self, kind: SchemaKind, name: str) -> None:
        self._register(kind, SchemaOperation(OperationAction.REMOVE, name))

    def configure(self, **overrides: Any) -> None:
        process_config.merge(overrides)
        self.class_config.update(overrides)
        self.invalidate()

    # ------------------------------------------------------------------
    # Mapas efetivos
    # ------------------------------------------------------------------

    def effective(self, kind: SchemaKind) -> Mapping[str, Spec]:
        cached = self._effective.get(kind)
        if cached is None:
            cached = MappingProxyType(self._build(kind))
            self._effective[kind] = cached
        return cached

    def names(self, kind: SchemaKind) -> List[str]:
        return list(self.effective(kind))

    def invalidate(self) -> None:
        self._effective.clear()
        for sub in self.owner.__subclasses__():
            sub_definition = definition_of(sub)
            if sub_definition is not None:
                sub_definition.invalidate()

    def resolve_config(self, *call_layers: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
        """Processo < classes (raiz → folha) < camadas da chamada."""
        return process_config.resolve(*self.config_chain(), *call_layers)

    def config_chain(self) -> List[Dict[str, Any]]:
        chain = self.parent.config_chain() if self.parent is not None else []
        if self.class_config:
            chain.append(dict(self.class_config))
        return chain

    def describe(self) -> Dict[str, List[dict]]:
        """Superfície de introspecção (somente leitura) para tooling externo."""
        return {kind.value: [spec.describe() for spec in self.effective(kind).values()] for kind in SchemaKind}

    # ------------------------------------------------------------------
    # Internos
    # ------------------------------------------------------------------

    def _register(self, kind: SchemaKind, operation: SchemaOperation) -> None:
        self.operations[kind].append(operation)
        self.invalidate()

    def _validate_new_name(self, kind: SchemaKind, name: str) -> None:
        validate_name(name, kind, self.owner_name)

        for other in SchemaKind:
            if other is kind:
                continue
            if name in self.effective(other):
                raise NameConflictError(
                    f"Cannot use `{name}` as {kind.label} name in {self.owner_name} - "
                    f"it is already defined as {'an' if other.label[0] in 'ao' else 'a'} {other.label}",
                    details={"owner": self.owner_name, "name": name, "existing": other.value},
                )

        declared_here = False
        for operation in self.operations[kind]:
            if operation.name != name:
                continue
            declared_here = operation.action is not OperationAction.REMOVE
        if declared_here:
            raise DuplicateNameError(
                f"{kind.label.capitalize()} `{name}` is already defined in {self.owner_name}. "
                "Each name must be declared once per class.",
                details={"owner": self.owner_name, "kind": kind.value, "name": name},
            )

    def _build(self, kind: SchemaKind) -> Dict[str, Spec]:
        result: Dict[str, Spec] = dict(self.parent.effective(kind)) if self.parent is not None else {}

        for operation in self.operations[kind]:
            if operation.action is OperationAction.REMOVE:
                result.pop(operation.name, None)
            elif operation.action is OperationAction.ADD:
                result[operation.name] = operation.spec
            else:
                result = _insert(result, operation)

        if kind is SchemaKind.STEPS:
            result = {name: self._bind_step(spec) for name, spec in result.items()}

        return result

    def _bind_step(self, spec: StepSpec) -> StepSpec:
        # o método mais derivado com o nome do step vence
        if spec.explicit:
            return spec
        func = getattr(self.owner, spec.name, None)
        if callable(func) and func is not spec.func:
            return replace(spec, func=func)
        return spec


def _insert(steps: Dict[str, Spec], operation: SchemaOperation) -> Dict[str, Spec]:
    steps = {name: spec for name, spec in steps.items() if name != operation.name}
    if operation.anchor not in steps:
        raise AnchorNotFoundError(
            f"Cannot find target step `{operation.anchor}` for `{operation.name}`",
            details={"step": operation.name, "anchor": operation.anchor},
        )

    result: Dict[str, Spec] = {}
    for name, spec in steps.items():
        if operation.before is not None and name == operation.before:
            result[operation.name] = operation.spec
        result[name] = spec
        if operation.after is not None and name == operation.after:
            result[operation.name] = operation.spec
    return result
