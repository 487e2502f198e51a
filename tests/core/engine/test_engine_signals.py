# tests/core/engine/test_engine_signals.py
"""
Testes dos sinais de controle (stop / stop_immediately / fail_immediately / crash).

Invariantes verificados:
    - stop: o step corrente termina; demais steps e `always` são pulados
    - stop_immediately: o corpo é interrompido; `always` são pulados
    - fail_immediately: o corpo é interrompido; erro adicionado; `always` rodam
    - crash: `always` rodam e a exceção original é propagada ao chamador,
      mesmo quando um step `always` também falha
"""

import pytest

from atlas_services import Output, Service, step
from atlas_services.core.pipeline import ExecutionState, StepSignal


class Signals(Service):
    trace = Output(list, default=[])
    config_mode = None

    @step
    def first(self):
        self.trace.append("first:start")
        mode = self.config_mode
        if mode == "stop":
            self.stop()
        elif mode == "stop_immediately":
            self.stop_immediately()
        elif mode == "fail_immediately":
            self.fail_immediately("aborted")
        elif mode == "crash":
            raise RuntimeError("boom")
        self.trace.append("first:end")

    @step
    def second(self):
        self.trace.append("second")

    @step(always=True)
    def cleanup(self):
        self.trace.append("cleanup")


def _run(mode):
    class Configured(Signals):
        config_mode = mode

    return Configured.run()


def test_graceful_stop_finishes_current_step_and_skips_always():
    service = _run("stop")

    assert service.trace == ["first:start", "first:end"]
    assert service.stopped
    assert service.success
    assert service.context.signal is StepSignal.STOP


def test_stop_immediately_aborts_body_and_skips_always():
    service = _run("stop_immediately")

    assert service.trace == ["first:start"]
    assert service.stopped
    assert service.success
    assert service.context.signal is StepSignal.STOP_IMMEDIATELY


def test_fail_immediately_aborts_body_and_runs_always():
    service = _run("fail_immediately")

    assert service.trace == ["first:start", "cleanup"]
    assert not service.stopped
    assert service.errors.to_dict() == {"base": ["aborted"]}
    assert service.context.signal is StepSignal.FAIL_IMMEDIATELY


def test_fail_immediately_ignores_break_policy():
    class Lenient(Signals, break_on_error=False):
        config_mode = "fail_immediately"

    service = Lenient.run()

    assert service.trace == ["first:start", "cleanup"]


def test_crash_runs_always_then_reraises():
    class Crashing(Signals):
        config_mode = "crash"

    with pytest.raises(RuntimeError, match="boom"):
        Crashing.run()

    service = Crashing()
    with pytest.raises(RuntimeError):
        service.call()

    assert service.trace == ["first:start", "cleanup"]
    assert any(e["message"] == "step.crashed" and e["exception"] == "RuntimeError" for e in service.context.events)


def test_crash_in_always_step_keeps_original_exception():
    class DoubleCrash(Signals):
        config_mode = "crash"

        @step(always=True)
        def cleanup(self):
            self.trace.append("cleanup")
            raise ValueError("cleanup failed")

    service = DoubleCrash()
    with pytest.raises(RuntimeError, match="boom"):
        service.call()

    assert service.trace == ["first:start", "cleanup"]
    crashed = [e for e in service.context.events if e["message"] == "always.crashed"]
    assert len(crashed) == 1
    assert "cleanup failed" in crashed[0]["error"]


def test_stop_before_steps_skips_everything():
    class StoppedEarly(Signals):
        config_mode = None

        def halt(self, service):
            self.stop()

    StoppedEarly.register_callback("before_service_run", "halt")

    service = StoppedEarly.run()

    assert service.trace == []
    assert service.context.launched == []


def test_state_machine_ends_done():
    service = _run(None)

    assert service.context.state is ExecutionState.DONE
    states = [e["message"] for e in service.context.events if e["message"].startswith("state.")]
    assert states == ["state.validating", "state.running", "state.completed", "state.finalizing", "state.done"]


def test_state_stopping_and_failing():
    stopped = _run("stop")
    failed = _run("fail_immediately")

    assert any(e["message"] == "state.stopping" for e in stopped.context.events)
    assert any(e["message"] == "state.failing" for e in failed.context.events)
