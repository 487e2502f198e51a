# tests/core/schema/test_definition_validation.py
"""
Testes das validações imediatas da DSL (fail fast).

Os testes asseguram que erros de definição surgem na declaração, antes
de qualquer invocação:
- nomes inválidos e reservados
- colisão entre tipos (argumento vs output vs step)
- nome duplicado na mesma classe
- tipo obrigatório conforme a política
- `if_` e `unless` simultâneos
- step sem callable resolvível
"""

import pytest

from atlas_services import (
    Argument,
    ConditionConflictError,
    DefinitionError,
    DuplicateNameError,
    InvalidNameError,
    MissingTypeError,
    NameConflictError,
    Output,
    ReservedNameError,
    Service,
    StepLookupError,
    config,
    step,
)


class Declared(Service):
    email = Argument(str)
    user = Output(dict)

    @step
    def persist(self):
        self.user = {"email": self.email}


@pytest.mark.parametrize("name", ["1abc", "with space", "class", "_private", ""])
def test_invalid_names_are_rejected(name):
    with pytest.raises(InvalidNameError):
        Declared.arg(name, str)


@pytest.mark.parametrize("name", ["errors", "success", "run", "using", "before_step_run", "context"])
def test_reserved_names_are_rejected(name):
    with pytest.raises(ReservedNameError) as exc:
        Declared.output(name, str)

    assert exc.value.details["name"] == name


def test_cross_kind_collision_is_rejected():
    """
    Verifica que um nome não pode existir como outro tipo no mapa efetivo.

    Invariantes:
        - A colisão também é detectada contra nomes herdados
        - A exceção informa o tipo já existente
    """
    with pytest.raises(NameConflictError) as exc:
        Declared.output("email", str)
    assert exc.value.details["existing"] == "arguments"

    with pytest.raises(NameConflictError):
        class Child(Declared):
            persist = Argument(str)


def test_duplicate_name_in_same_class_is_rejected():
    class Local(Service):
        total = Output(int)

    with pytest.raises(DuplicateNameError):
        Local.output("total", int)


def test_missing_type_follows_policy():
    with pytest.raises(MissingTypeError):
        class Untyped(Service):
            value = Argument()

    config.update(require_output_type=False)

    class UntypedOutput(Service):
        value = Output()

    assert UntypedOutput.definition().effective(Output.kind)["value"].validator is None


def test_explicit_none_type_exempts_field():
    class Exempt(Service):
        anything = Argument(None)

    assert Exempt.definition().effective(Argument.kind)["anything"].validator is None


def test_context_flag_only_for_arguments():
    class Local(Service):
        pass

    with pytest.raises(DefinitionError):
        Local.definition().add_field(Output.kind, "shared", type=str, context=True)


def test_if_and_unless_together_conflict():
    with pytest.raises(ConditionConflictError):
        class Conflicting(Service):
            @step(if_="ready", unless="blocked")
            def work(self):
                pass


def test_before_and_after_together_is_invalid():
    with pytest.raises(DefinitionError):
        Declared.add_step("audit", lambda service: None, before="persist", after="persist")


def test_step_without_callable_raises_lookup_error():
    with pytest.raises(StepLookupError):
        Declared.add_step("not_implemented")


def test_unknown_callback_event_is_rejected():
    with pytest.raises(DefinitionError):
        Declared.register_callback("before_everything", lambda service: None)
