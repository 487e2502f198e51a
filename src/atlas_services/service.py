# src/atlas_services/service.py
"""
Classe base de serviços do Atlas Services.

Um serviço é uma unidade de trabalho declarada com argumentos tipados,
outputs tipados e uma lista ordenada de steps:

    class CreateUser(Service):
        email = Argument(str)
        age = Argument(Coerce(int), optional=True)
        user = Output(dict)

        @step
        def validate(self):
            if "@" not in self.email:
                self.fail("is invalid", key="email")

        @step
        def persist(self):
            self.user = {"email": self.email}

    result = CreateUser.run(email="a@b.c")
    result.success

Declarações podem ser feitas no corpo da classe (`Argument`, `Output`,
`@step`, `@callback`) ou após a criação da classe (`arg`, `output`,
`add_step`, `remove_*`, `register_callback`). Em ambos os casos viram
operações no `ServiceDefinition` da classe declarante.

Overrides de configuração de classe podem ser passados como keywords da
classe:

    class Quiet(Service, break_on_error=False):
        ...
"""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Mapping, Optional

from atlas_services.core.callbacks import Handler
from atlas_services.core.collection import TypedCollection
from atlas_services.core.engine import ExecutionEngine
from atlas_services.core.messages import BASE_KEY, MessageLog
from atlas_services.core.pipeline import ExecutionContext, StepInterrupted, StepSignal
from atlas_services.core.schema import MISSING, SchemaKind, ServiceDefinition, definition_of
from atlas_services.core.schema.definition import DEFINITION_ATTR
from atlas_services.core.schema.specs import Condition
from atlas_services.invoker import ServiceInvoker

STEP_ATTR = "__service_step__"
CALLBACK_ATTR = "__service_callbacks__"


# ----------------------------------------------------------------------
# Declarações no corpo da classe
# ----------------------------------------------------------------------

class Argument:
    """Declaração de argumento no corpo da classe (convertida em `FieldSpec`)."""

    kind = SchemaKind.ARGUMENTS

    def __init__(
        self,
        type: Any = MISSING,
        *,
        optional: bool = False,
        default: Any = MISSING,
        context: bool = False,
    ):
        self.type = type
        self.optional = optional
        self.default = default
        self.context = context

    def options(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "optional": self.optional,
            "default": self.default,
            "context": self.context,
        }


class Output(Argument):
    """Declaração de output no corpo da classe."""

    kind = SchemaKind.OUTPUTS

    def __init__(self, type: Any = MISSING, *, optional: bool = False, default: Any = MISSING):
        super().__init__(type, optional=optional, default=default)


def step(
    func: Optional[Callable[..., Any]] = None,
    *,
    before: Optional[str] = None,
    after: Optional[str] = None,
    if_: Condition = None,
    unless: Condition = None,
    always: bool = False,
) -> Any:
    """
    Marca um método como step. Aceita `@step` e `@step(...)`.

    Os steps marcados são registrados em ordem de definição no corpo da classe.
    """
    options = {"before": before, "after": after, "if_": if_, "unless": unless, "always": always}

    def mark(f: Callable[..., Any]) -> Callable[..., Any]:
        setattr(f, STEP_ATTR, options)
        return f

    if func is not None:
        return mark(func)
    return mark


def callback(*events: str) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Registra o método decorado como handler dos eventos informados."""

    def mark(f: Callable[..., Any]) -> Callable[..., Any]:
        setattr(f, CALLBACK_ATTR, list(getattr(f, CALLBACK_ATTR, [])) + list(events))
        return f

    return mark


# ----------------------------------------------------------------------
# Service
# ----------------------------------------------------------------------

class Service:
    """Base de todos os serviços declarados."""

    def __init_subclass__(cls, **overrides: Any):
        super().__init_subclass__()

        definition = ServiceDefinition(cls)
        setattr(cls, DEFINITION_ATTR, definition)
        if overrides:
            definition.configure(**overrides)

        for name, value in list(cls.__dict__.items()):
            if isinstance(value, Argument):
                definition.add_field(value.kind, name, **value.options())
                continue

            step_options = getattr(value, STEP_ATTR, None)
            if step_options is not None:
                definition.add_step(name, func=value, **step_options)

            for event in getattr(value, CALLBACK_ATTR, ()):
                definition.callbacks.register(event, name)

    def __init__(
        self,
        arguments: Any = None,
        *,
        config: Optional[Mapping[str, Any]] = None,
        parent: Optional["Service"] = None,
    ):
        definition = definition_of(type(self))
        resolved = definition.resolve_config(config)

        self._definition = definition
        self._parent_service = parent
        self.context = ExecutionContext(
            service=type(self).__name__,
            config=resolved,
            parent=parent.context if parent is not None else None,
        )

        self.errors = MessageLog(
            break_on_add=resolved["break_on_error"],
            raise_on_add=resolved["raise_on_error"],
            rollback_on_add=resolved["use_transactions"] and resolved["rollback_on_error"],
            on_rollback=self.context.request_rollback,
        )
        self.warnings = MessageLog(
            break_on_add=resolved["break_on_warning"],
            raise_on_add=resolved["raise_on_warning"],
            rollback_on_add=resolved["use_transactions"] and resolved["rollback_on_warning"],
            on_rollback=self.context.request_rollback,
        )

        storage = dict(arguments) if isinstance(arguments, dict) else arguments
        self.arguments = TypedCollection(self, SchemaKind.ARGUMENTS, definition.effective(SchemaKind.ARGUMENTS), storage)
        self.outputs = TypedCollection(self, SchemaKind.OUTPUTS, definition.effective(SchemaKind.OUTPUTS))

    def __repr__(self) -> str:
        return f"<{type(self).__name__} success={self.success} errors={self.errors.to_dict()!r}>"

    # ------------------------------------------------------------------
    # Estado
    # ------------------------------------------------------------------

    @property
    def config(self) -> Dict[str, Any]:
        return self.context.config

    @property
    def success(self) -> bool:
        return not self.errors

    @property
    def failed(self) -> bool:
        return bool(self.errors)

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    @property
    def has_warnings(self) -> bool:
        return bool(self.warnings)

    @property
    def stopped(self) -> bool:
        return self.context.stopped

    # ------------------------------------------------------------------
    # Controle de fluxo
    # ------------------------------------------------------------------

    def stop(self) -> None:
        """Parada graciosa: o step corrente termina, os demais (inclusive always) são pulados."""
        self.context.stopped = True

    def stop_immediately(self) -> None:
        self.context.stopped = True
        raise StepInterrupted(StepSignal.STOP_IMMEDIATELY)

    def fail(self, text: str, key: str = BASE_KEY) -> None:
        self.errors.add(key, text)

    def fail_immediately(self, text: str) -> None:
        self.errors.add(BASE_KEY, text)
        raise StepInterrupted(StepSignal.FAIL_IMMEDIATELY)

    def call(self) -> "Service":
        ExecutionEngine(self, self._definition, parent=self._parent_service).call()
        return self

    # ------------------------------------------------------------------
    # API de classe
    # ------------------------------------------------------------------

    @classmethod
    def run(cls, **arguments: Any) -> "Service":
        return cls(arguments).call()

    @classmethod
    def run_strict(cls, **arguments: Any) -> "Service":
        return cls(arguments, config={"raise_on_error": True}).call()

    @classmethod
    def using(cls, parent_or_config: Any = None, config: Optional[Mapping[str, Any]] = None) -> ServiceInvoker:
        return ServiceInvoker(cls, parent_or_config, config)

    @classmethod
    def configure(cls, **overrides: Any) -> None:
        definition_of(cls).configure(**overrides)

    @classmethod
    def definition(cls) -> ServiceDefinition:
        return definition_of(cls)

    @classmethod
    def arg(cls, name: str, type: Any = MISSING, *, optional: bool = False, default: Any = MISSING, context: bool = False):
        return definition_of(cls).add_field(
            SchemaKind.ARGUMENTS, name, type=type, optional=optional, default=default, context=context
        )

    @classmethod
    def output(cls, name: str, type: Any = MISSING, *, optional: bool = False, default: Any = MISSING):
        return definition_of(cls).add_field(SchemaKind.OUTPUTS, name, type=type, optional=optional, default=default)

    @classmethod
    def add_step(
        cls,
        name: str,
        func: Optional[Callable[..., Any]] = None,
        *,
        before: Optional[str] = None,
        after: Optional[str] = None,
        if_: Condition = None,
        unless: Condition = None,
        always: bool = False,
    ):
        return definition_of(cls).add_step(
            name, func=func, before=before, after=after, if_=if_, unless=unless, always=always
        )

    @classmethod
    def remove_arg(cls, name: str) -> None:
        definition_of(cls).remove(SchemaKind.ARGUMENTS, name)

    @classmethod
    def remove_output(cls, name: str) -> None:
        definition_of(cls).remove(SchemaKind.OUTPUTS, name)

    @classmethod
    def remove_step(cls, name: str) -> None:
        definition_of(cls).remove(SchemaKind.STEPS, name)

    @classmethod
    def register_callback(cls, event: str, handler: Handler) -> None:
        definition_of(cls).callbacks.register(event, handler)

    @classmethod
    def callbacks_for(cls, event: str) -> List[Handler]:
        return definition_of(cls).callbacks.all_for(event)


setattr(Service, DEFINITION_ATTR, ServiceDefinition(Service))
