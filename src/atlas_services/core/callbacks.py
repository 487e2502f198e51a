# src/atlas_services/core/callbacks.py
"""
Registro e despacho de callbacks de ciclo de vida.

Dois tipos de evento:
    - simples (`before_*`, `after_*`, `on_*_success`, `on_*_failure`, `on_*_crash`)
    - around (`around_*`), que recebem uma continuação e precisam chamá-la

Cada classe de serviço possui seu próprio `CallbackRegistry`, ligado ao
registry da classe pai. Handlers da classe base sempre rodam antes dos
handlers da subclasse.

Um handler é:
    - o nome de um método do serviço (str), chamado como `metodo(*args)`
    - um callable, chamado como `handler(*args)`

Para eventos around a continuação é passada como último argumento posicional.
"""

from __future__ import annotations

from functools import reduce
from typing import Any, Callable, Dict, List, Optional, Sequence, Union

from atlas_services.core.exceptions import DefinitionError

Handler = Union[str, Callable[..., Any]]

STEP_EVENTS = (
    "before_step_run",
    "after_step_run",
    "around_step_run",
    "on_step_success",
    "on_step_failure",
    "on_step_crash",
)

SERVICE_EVENTS = (
    "before_service_run",
    "after_service_run",
    "around_service_run",
    "on_service_success",
    "on_service_failure",
)

EVENTS = STEP_EVENTS + SERVICE_EVENTS


def is_around(event: str) -> bool:
    return event.startswith("around_")


class CallbackRegistry:
    """Handlers declarados em uma classe, com acesso aos herdados via `parent`."""

    def __init__(self, parent: Optional["CallbackRegistry"] = None):
        self.parent = parent
        self._own: Dict[str, List[Handler]] = {}

    def register(self, event: str, handler: Handler) -> None:
        if event not in EVENTS:
            raise DefinitionError(
                f"Unknown callback event `{event}`",
                details={"event": event, "known": list(EVENTS)},
            )
        if not isinstance(handler, str) and not callable(handler):
            raise DefinitionError(
                f"{event} callback must be a method name or a callable, got {type(handler).__name__}",
                details={"event": event},
            )
        self._own.setdefault(event, []).append(handler)

    def own_for(self, event: str) -> List[Handler]:
        return list(self._own.get(event, []))

    def all_for(self, event: str) -> List[Handler]:
        inherited = self.parent.all_for(event) if self.parent is not None else []
        return inherited + self.own_for(event)


def _execute(instance: Any, handler: Handler, args: Sequence[Any]) -> Any:
    if isinstance(handler, str):
        return getattr(instance, handler)(*args)
    return handler(*args)


def dispatch(
    registry: CallbackRegistry,
    event: str,
    instance: Any,
    args: Sequence[Any],
    continuation: Optional[Callable[[], Any]] = None,
) -> Any:
    """
    Dispara `event` para todos os handlers efetivos.

    - simples: cada handler em ordem, depois a continuação (se houver)
    - around: cadeia aninhada em que o primeiro handler registrado é o mais
      externo; a continuação fornecida é o núcleo da cadeia
    """
    handlers = registry.all_for(event)

    if not is_around(event):
        for handler in handlers:
            _execute(instance, handler, args)
        return continuation() if continuation is not None else None

    core = continuation if continuation is not None else (lambda: None)
    if not handlers:
        return core()

    def wrap(proceed: Callable[[], Any], handler: Handler) -> Callable[[], Any]:
        return lambda: _execute(instance, handler, [*args, proceed])

    chain = reduce(wrap, reversed(handlers), core)
    return chain()
