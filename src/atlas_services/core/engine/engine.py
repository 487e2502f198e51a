# src/atlas_services/core/engine/engine.py
"""
Engine de execução de uma invocação de serviço.

O `ExecutionEngine` orquestra uma única invocação:

    Pending → Validating → Running → {Stopping | Failing | Completed}
            → Finalizing → Done

Fases:
    1. Validating: defaults de outputs e argumentos, validação de argumentos
       (erro de tipo aqui é falha dura, nunca Message)
    2. Running: `before_service_run`, depois `around_service_run` envolvendo
       o loop de steps
    3. Loop de steps dentro do escopo transacional (quando habilitado)
    4. Steps `always` não lançados (pulados após stop/stop_immediately)
    5. Validação de outputs (apenas em caso de sucesso)
    6. Propagação de warnings/errors ao serviço pai
    7. Finalizing: `after_service_run` e `on_service_success`/`on_service_failure`

Decisões arquiteturais:
    - Controle de fluxo entre steps via `StepSignal`, nunca por exceção
      atravessando o loop
    - `stop_immediately`/`fail_immediately` não são crashes: callbacks de
      step continuam a disparar normalmente
    - Crash de um step: rollback do escopo, steps `always`, re-raise
    - Falha tardia na validação de outputs não desfaz o commit

Limites explícitos:
    - Não implementa persistência (ver `TransactionManager`)
    - Não faz retry
"""

from __future__ import annotations

from typing import Any, Mapping, Optional

from atlas_services.core.callbacks import dispatch
from atlas_services.core.config import ConfigError
from atlas_services.core.exceptions import NoStepsError
from atlas_services.core.pipeline.types import ExecutionState, StepInterrupted, StepSignal
from atlas_services.core.schema.definition import ServiceDefinition
from atlas_services.core.schema.specs import SchemaKind, StepSpec

from .transaction import TransactionManager


class ExecutionEngine:
    """Executor de uma invocação (uma instância de serviço, uma chamada)."""

    def __init__(self, service: Any, definition: ServiceDefinition, *, parent: Any = None):
        self.service = service
        self.definition = definition
        self.parent = parent
        self.ctx = service.context
        self.callbacks = definition.callbacks

    # ------------------------------------------------------------------
    # API
    # ------------------------------------------------------------------

    def call(self) -> None:
        steps = self.definition.effective(SchemaKind.STEPS)
        if not steps:
            raise NoStepsError(
                f"Service {self.definition.owner_name} has no steps defined",
                details={"service": self.definition.owner_name},
                hint="Declare at least one step with @step or add_step",
            )

        self.ctx.log(level="INFO", message="service.started", parent=self._parent_run_id())

        self.ctx.transition(ExecutionState.VALIDATING)
        self.service.outputs.load_defaults()
        self.service.arguments.load_defaults()
        self.service.arguments.validate()

        self.ctx.transition(ExecutionState.RUNNING)
        args = (self.service,)
        try:
            dispatch(self.callbacks, "before_service_run", self.service, args)
            dispatch(self.callbacks, "around_service_run", self.service, args, lambda: self._execute(steps))
        except StepInterrupted as e:
            # stop/fail imediato disparado fora de um step (callbacks de serviço)
            self._record_signal(e.signal)

        self.ctx.transition(ExecutionState.FINALIZING)
        dispatch(self.callbacks, "after_service_run", self.service, args)
        if self.service.success:
            dispatch(self.callbacks, "on_service_success", self.service, args)
        else:
            dispatch(self.callbacks, "on_service_failure", self.service, args)

        self.ctx.transition(ExecutionState.DONE)
        self.ctx.log(
            level="INFO" if self.service.success else "WARNING",
            message="service.finished",
            success=self.service.success,
            launched=list(self.ctx.launched),
            errors=self.service.errors.to_dict(),
            warnings=self.service.warnings.to_dict(),
        )

    # ------------------------------------------------------------------
    # Fases
    # ------------------------------------------------------------------

    def _execute(self, steps: Mapping[str, StepSpec]) -> None:
        try:
            self._run_steps(steps)
        except Exception as crash:
            try:
                self._run_always(steps)
            except Exception as cleanup_error:
                self.ctx.log(
                    level="ERROR",
                    message="always.crashed",
                    error=repr(cleanup_error),
                    original=repr(crash),
                )
            raise

        self._run_always(steps)

        if self.service.success:
            self.service.outputs.validate()

        self._propagate_to_parent()

    def _run_steps(self, steps: Mapping[str, StepSpec]) -> None:
        manager = self._transaction_manager()
        handle = manager.begin_scope(nested=self.parent is not None) if manager is not None else None

        try:
            for spec in steps.values():
                signal = self._run_step(spec)
                if signal.halts_loop or self.service.errors.is_broken or self.service.warnings.is_broken:
                    break
        except Exception as e:
            if manager is not None:
                manager.rollback(handle)
                self.ctx.log(level="ERROR", message="transaction.rollback", reason=type(e).__name__)
            raise

        self._settle_state()

        if manager is None:
            return
        if self.ctx.rollback_requested:
            manager.rollback(handle)
            self.ctx.log(level="WARNING", message="transaction.rollback", reason="rollback requested")
        else:
            manager.commit(handle)
            self.ctx.log(level="INFO", message="transaction.commit")

    def _run_always(self, steps: Mapping[str, StepSpec]) -> None:
        if self.ctx.stopped:
            for spec in steps.values():
                if spec.always and spec.name not in self.ctx.launched:
                    self.ctx.log(level="DEBUG", message="step.skipped", step=spec.name, reason="stopped")
            return

        for spec in steps.values():
            if not spec.always or spec.name in self.ctx.launched:
                continue
            if self._run_step(spec).halts_loop:
                break

    def _run_step(self, spec: StepSpec) -> StepSignal:
        name = spec.name

        if self.ctx.stopped:
            self.ctx.log(level="DEBUG", message="step.skipped", step=name, reason="stopped")
            return StepSignal.STOP
        if not spec.selected(self.service):
            self.ctx.log(level="DEBUG", message="step.skipped", step=name, reason="condition")
            return StepSignal.CONTINUE

        self.ctx.launched.append(name)
        self.ctx.log(level="INFO", message="step.started", step=name)

        errors_before = self.service.errors.count()
        signal = StepSignal.CONTINUE
        args = (self.service, name)

        def body() -> None:
            nonlocal signal
            try:
                spec.func(self.service)
            except StepInterrupted as e:
                signal = e.signal

        try:
            dispatch(self.callbacks, "before_step_run", self.service, args)
            dispatch(self.callbacks, "around_step_run", self.service, args, body)
            dispatch(self.callbacks, "after_step_run", self.service, args)

            if self.service.errors.count() > errors_before:
                dispatch(self.callbacks, "on_step_failure", self.service, args)
            else:
                dispatch(self.callbacks, "on_step_success", self.service, args)
        except StepInterrupted as e:
            signal = e.signal
        except Exception as e:
            self.ctx.log(level="ERROR", message="step.crashed", step=name, exception=type(e).__name__, error=str(e))
            dispatch(self.callbacks, "on_step_crash", self.service, (*args, e))
            raise

        if signal is StepSignal.CONTINUE:
            if self.ctx.stopped:
                signal = StepSignal.STOP
            elif self.service.errors.count() > errors_before:
                signal = StepSignal.FAIL

        self._record_signal(signal)
        self.ctx.log(level="INFO", message="step.finished", step=name, signal=signal.value)
        return signal

    def _propagate_to_parent(self) -> None:
        if self.parent is None:
            return

        cfg = self.ctx.config
        if cfg["load_warnings"]:
            self.parent.warnings.copy_from(
                self.service.warnings,
                break_=cfg["self_break_on_warning"],
                rollback=cfg["self_rollback_on_warning"],
            )
        if cfg["load_errors"]:
            self.parent.errors.copy_from(
                self.service.errors,
                break_=cfg["self_break_on_error"],
                rollback=cfg["self_rollback_on_error"],
            )

    # ------------------------------------------------------------------
    # Internos
    # ------------------------------------------------------------------

    def _transaction_manager(self) -> Optional[TransactionManager]:
        if not self.ctx.transactions_enabled:
            return None

        manager = self.ctx.config["transaction_manager"]
        if not isinstance(manager, TransactionManager):
            raise ConfigError(
                f"transaction_manager must provide begin_scope/commit/rollback, "
                f"got {type(manager).__name__}"
            )
        return manager

    def _record_signal(self, signal: StepSignal) -> None:
        if signal is StepSignal.CONTINUE:
            return
        self.ctx.signal = signal
        if signal.skips_always:
            self.ctx.stopped = True

    def _settle_state(self) -> None:
        if self.ctx.stopped:
            self.ctx.transition(ExecutionState.STOPPING)
        elif not self.service.success:
            self.ctx.transition(ExecutionState.FAILING)
        else:
            self.ctx.transition(ExecutionState.COMPLETED)

    def _parent_run_id(self) -> Optional[str]:
        parent_ctx = self.ctx.parent
        return parent_ctx.run_id if parent_ctx is not None else None
