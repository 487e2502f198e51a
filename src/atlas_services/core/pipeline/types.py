# src/atlas_services/core/pipeline/types.py
"""
Tipos canônicos da execução de um serviço.

    - ExecutionState → estados da máquina de execução de uma invocação
    - StepSignal     → resultado de controle de um step, avaliado pelo loop

Os valores são strings para facilitar serialização no event log.
"""

from __future__ import annotations

from enum import Enum


class ExecutionState(str, Enum):
    """
    Estados de uma invocação.

    Pending → Validating → Running → {Stopping | Failing | Completed}
            → Finalizing → Done
    """
    PENDING = "pending"
    VALIDATING = "validating"
    RUNNING = "running"
    STOPPING = "stopping"
    FAILING = "failing"
    COMPLETED = "completed"
    FINALIZING = "finalizing"
    DONE = "done"


class StepSignal(str, Enum):
    """
    Sinal de controle produzido pela execução de um step.

    - CONTINUE: segue para o próximo step
    - STOP: parada graciosa (o corpo terminou; steps restantes e always são pulados)
    - STOP_IMMEDIATELY: corpo interrompido; sem rollback; always pulados
    - FAIL: o step adicionou errors (o loop consulta a flag de break do log)
    - FAIL_IMMEDIATELY: corpo interrompido com error; always ainda rodam
    """
    CONTINUE = "continue"
    STOP = "stop"
    STOP_IMMEDIATELY = "stop_immediately"
    FAIL = "fail"
    FAIL_IMMEDIATELY = "fail_immediately"

    @property
    def halts_loop(self) -> bool:
        return self in (StepSignal.STOP, StepSignal.STOP_IMMEDIATELY, StepSignal.FAIL_IMMEDIATELY)

    @property
    def skips_always(self) -> bool:
        return self in (StepSignal.STOP, StepSignal.STOP_IMMEDIATELY)


class StepInterrupted(Exception):
    """Interrompe o corpo do step corrente; convertido em StepSignal pelo runner."""

    def __init__(self, signal: StepSignal):
        self.signal = signal
        super().__init__(signal.value)
