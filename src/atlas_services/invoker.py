# src/atlas_services/invoker.py
"""
Invocação de um serviço sob um serviço pai e/ou com configuração própria.

    ChildService.using(self).run(email=email)
    ChildService.using({"use_transactions": False}).run()
    ChildService.using(self, {"load_errors": False}).run_strict()

Com um serviço pai:
    - argumentos marcados como `context` no pai são repassados ao filho
      quando o filho não os recebe explicitamente
    - errors/warnings do filho são propagados ao pai ao final da invocação
    - o escopo transacional do filho é aninhado (savepoint)
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, Mapping, Optional, Type

from atlas_services.core.exceptions import ArgumentTypeError

if TYPE_CHECKING:
    from atlas_services.service import Service


class ServiceInvoker:
    def __init__(
        self,
        service_class: Type["Service"],
        parent_or_config: Any = None,
        config: Optional[Mapping[str, Any]] = None,
    ):
        from atlas_services.service import Service

        if isinstance(parent_or_config, Mapping):
            parent = None
            merged: Dict[str, Any] = {**parent_or_config, **(config or {})}
        else:
            parent = parent_or_config
            merged = dict(config or {})

        if parent is not None and not isinstance(parent, Service):
            raise ArgumentTypeError(
                f"{type(parent).__name__} - must be an instance of a Service subclass",
                details={"service": service_class.__name__, "received": type(parent).__name__},
            )

        self.service_class = service_class
        self.parent = parent
        self.config = merged

    def run(self, **arguments: Any) -> "Service":
        return self._build(arguments, self.config).call()

    def run_strict(self, **arguments: Any) -> "Service":
        return self._build(arguments, {**self.config, "raise_on_error": True}).call()

    def _build(self, arguments: Dict[str, Any], config: Mapping[str, Any]) -> "Service":
        if self.parent is not None:
            arguments = self.parent.arguments.extend_with_context(dict(arguments))
        return self.service_class(arguments, config=config, parent=self.parent)
