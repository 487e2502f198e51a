# src/atlas_services/core/pipeline/context.py
"""
Contexto de execução de uma invocação de serviço.

Este módulo define o `ExecutionContext`, o estado transitório de uma
invocação: identidade, snapshot de configuração, referência ao contexto
pai (invocações aninhadas), steps lançados, sinal de parada e o log
estruturado de eventos.

Princípios fundamentais:
    - Isolamento por invocação (cada invocação possui seu próprio contexto)
    - A configuração é um snapshot: mudanças no processo não afetam a
      invocação em andamento
    - Logs são estruturados e sempre incluem `run_id` e `service`

Limites explícitos:
    - Não executa steps
    - Não persiste eventos
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from uuid import uuid4

from .types import ExecutionState, StepSignal


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass
class ExecutionContext:
    """
    Estado transitório de uma invocação.

    Campos canônicos:
    - run_id: identificador único da invocação
    - service: nome da classe do serviço
    - config: snapshot efetivo (processo < classe < chamada)
    - parent: contexto da invocação pai (None na raiz)
    - state: estado corrente da máquina de execução
    - launched: steps efetivamente executados, em ordem
    - signal: último sinal de controle relevante
    - rollback_requested: pedido de rollback do escopo transacional corrente
    - events: log estruturado de eventos
    """

    service: str
    config: Dict[str, Any]
    parent: Optional["ExecutionContext"] = None
    run_id: str = field(default_factory=lambda: uuid4().hex)
    created_at: str = field(default_factory=_now_iso)

    state: ExecutionState = ExecutionState.PENDING
    launched: List[str] = field(default_factory=list)
    stopped: bool = False
    signal: StepSignal = StepSignal.CONTINUE
    rollback_requested: bool = False
    events: List[Dict[str, Any]] = field(default_factory=list)

    @property
    def depth(self) -> int:
        return 0 if self.parent is None else self.parent.depth + 1

    @property
    def transactions_enabled(self) -> bool:
        return bool(self.config.get("use_transactions")) and self.config.get("transaction_manager") is not None

    def request_rollback(self) -> None:
        self.rollback_requested = True

    # -----------------------------
    # Logging
    # -----------------------------
    def log(self, *, level: str, message: str, step: Optional[str] = None, **extra: Any) -> None:
        event = {
            "run_id": self.run_id,
            "service": self.service,
            "step": step,
            "depth": self.depth,
            "level": level,
            "message": message,
            "timestamp": _now_iso(),
        }
        event.update(extra)
        self.events.append(event)

    def transition(self, state: ExecutionState) -> None:
        self.state = state
        self.log(level="DEBUG", message=f"state.{state.value}")
