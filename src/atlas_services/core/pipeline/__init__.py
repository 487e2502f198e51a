"""
# Pipeline Core — Atlas Services

Estruturas de estado transitório de uma invocação.

## Componentes

- **types**
  - `ExecutionState`: estados da máquina de execução
  - `StepSignal`: sinal de controle avaliado pelo loop após cada step
  - `StepInterrupted`: interrupção do corpo do step corrente

- **context**
  - `ExecutionContext`: snapshot de configuração, steps lançados, parent e event log
"""

from .context import ExecutionContext
from .types import ExecutionState, StepInterrupted, StepSignal

__all__ = ["ExecutionContext", "ExecutionState", "StepInterrupted", "StepSignal"]
