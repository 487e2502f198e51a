# tests/core/test_messages.py
"""
Testes do acúmulo de errors/warnings (MessageLog).

Os testes asseguram que:
- opções por chamada têm precedência sobre a política do log
- a flag de break é monotônica
- raise-on-add levanta `RaisedMessageError` com chave e texto
- o sinal de rollback dispara uma única vez por lote
- `copy_from` reaplica `add` com a política do destino
"""

import pytest
from pydantic import BaseModel, ValidationError

from atlas_services.core.exceptions import RaisedMessageError, ServiceError
from atlas_services.core.messages import Message, MessageLog


def test_add_appends_in_order_and_summarizes():
    log = MessageLog()
    log.add("email", "is blank")
    log.add("email", ["is invalid", "is taken"])
    log.add("base", "failed")

    assert log.to_dict() == {"email": ["is blank", "is invalid", "is taken"], "base": ["failed"]}
    assert log.count() == 4
    assert log.keys() == ["email", "base"]
    assert "email" in log
    assert len(log) == 2
    assert [m.text for m in log["email"]] == ["is blank", "is invalid", "is taken"]
    assert log["missing"] == []


def test_break_flag_follows_policy_and_overrides():
    log = MessageLog(break_on_add=False)
    log.add("base", "soft")
    assert not log.is_broken

    log.add("base", "hard", break_=True)
    assert log.is_broken

    log.add("base", "soft again", break_=False)
    assert log.is_broken


def test_per_message_flags_are_resolved():
    log = MessageLog(break_on_add=True, rollback_on_add=False)
    log.add("base", "a", break_=False, rollback=True)

    message = log["base"][0]
    assert message == Message(key="base", text="a", break_=False, rollback=True)
    assert not log.is_broken


def test_raise_on_add_embeds_key_and_text():
    log = MessageLog(raise_on_add=True)

    with pytest.raises(RaisedMessageError) as exc:
        log.add("email", "not found")

    assert exc.value.key == "email"
    assert exc.value.text == "not found"
    assert log.to_dict() == {"email": ["not found"]}


def test_rollback_signal_fires_once_per_batch():
    calls = []
    log = MessageLog(rollback_on_add=True, on_rollback=lambda: calls.append(1))

    log.add("base", ["a", "b", "c"])
    assert calls == [1]

    log.add("base", "d", rollback=False)
    assert calls == [1]

    log.add("base", "e", last=False)
    assert calls == [1]


@pytest.mark.parametrize("bad", [None, "", "   ", 42, []])
def test_invalid_texts_are_rejected(bad):
    with pytest.raises(ServiceError):
        MessageLog().add("base", bad)


def test_copy_from_applies_destination_policy():
    """
    Verifica que mensagens propagadas seguem a política do destino.

    Invariantes:
        - A flag de break da origem não é copiada
        - O destino marca break conforme sua própria política
    """
    source = MessageLog(break_on_add=False)
    source.add("email", "not found")

    strict = MessageLog(break_on_add=True)
    strict.copy_from(source)
    assert strict.is_broken
    assert strict.to_dict() == {"email": ["not found"]}

    lenient = MessageLog(break_on_add=True)
    lenient.copy_from(source, break_=False)
    assert not lenient.is_broken


def test_copy_from_mapping_and_pairs():
    log = MessageLog()
    log.copy_from({"name": ["is blank", "is short"]})
    log.copy_from([("age", "is negative")])

    assert log.to_dict() == {"name": ["is blank", "is short"], "age": ["is negative"]}


def test_copy_from_pydantic_validation_error():
    class Payload(BaseModel):
        age: int

    with pytest.raises(ValidationError) as exc:
        Payload(age="old")

    log = MessageLog()
    log.copy_from(exc.value)

    assert log.keys() == ["age"]
    assert log.count() == 1


def test_copy_from_object_with_errors_log():
    class Holder:
        def __init__(self):
            self.errors = MessageLog()
            self.errors.add("base", "boom")

    log = MessageLog()
    log.copy_from(Holder())

    assert log.to_dict() == {"base": ["boom"]}


def test_copy_from_unknown_source_raises():
    with pytest.raises(ServiceError):
        MessageLog().copy_from(42)


def test_copy_from_empty_source_is_noop():
    calls = []
    log = MessageLog(rollback_on_add=True, on_rollback=lambda: calls.append(1))
    log.copy_from(MessageLog())

    assert not log
    assert calls == []
