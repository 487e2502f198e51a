# src/atlas_services/core/schema/validation.py
"""
Validações imediatas da DSL de declaração.

Cada operação `add` é validada no momento do registro, antes de qualquer
invocação:
    - nome precisa ser um identificador atômico
    - nome não pode colidir com nomes reservados do engine
    - nome não pode existir como outro tipo no mapa efetivo
    - campos precisam de tipo quando a política exige
"""

from __future__ import annotations

import keyword
from typing import Any

from atlas_services.core.exceptions import (
    InvalidNameError,
    MissingTypeError,
    ReservedNameError,
)

from .specs import SchemaKind

# Atributos de instância do Service
BASE_METHODS = frozenset({
    "arguments",
    "outputs",
    "errors",
    "warnings",
    "context",
    "config",
    "success",
    "failed",
    "has_errors",
    "has_warnings",
    "stop",
    "stopped",
    "stop_immediately",
    "fail",
    "fail_immediately",
    "call",
})

# Métodos de classe da DSL
CLASS_METHODS = frozenset({
    "run",
    "run_strict",
    "using",
    "configure",
    "definition",
    "arg",
    "output",
    "add_step",
    "remove_arg",
    "remove_output",
    "remove_step",
    "register_callback",
    "callbacks_for",
})

CALLBACK_EVENTS = frozenset({
    "before_step_run",
    "after_step_run",
    "around_step_run",
    "on_step_success",
    "on_step_failure",
    "on_step_crash",
    "before_service_run",
    "after_service_run",
    "around_service_run",
    "on_service_success",
    "on_service_failure",
})

RESERVED_NAMES = BASE_METHODS | CLASS_METHODS | CALLBACK_EVENTS | frozenset({"self", "cls", "mro"})


def validate_name(name: Any, kind: SchemaKind, owner: str) -> None:
    if not isinstance(name, str) or not name.isidentifier() or keyword.iskeyword(name) or name.startswith("_"):
        raise InvalidNameError(
            f"{kind.label.capitalize()} name must be a public identifier, "
            f"got {type(name).__name__} ({name!r}) in {owner}",
            details={"owner": owner, "kind": kind.value, "name": repr(name)},
        )

    if name in RESERVED_NAMES:
        raise ReservedNameError(
            f"Cannot use `{name}` as {kind.label} name in {owner} - "
            "it is a reserved word that conflicts with engine methods",
            details={"owner": owner, "kind": kind.value, "name": name},
        )


def validate_type_required(name: str, kind: SchemaKind, owner: str, *, has_type: bool, required: bool) -> None:
    if has_type or not required:
        return

    config_name = "require_arg_type" if kind is SchemaKind.ARGUMENTS else "require_output_type"
    raise MissingTypeError(
        f"{kind.label.capitalize()} `{name}` in {owner} must have a type specified "
        f"({config_name} is enabled)",
        details={"owner": owner, "kind": kind.value, "name": name},
        hint="Declare `type=` or pass `type=None` to exempt the field explicitly",
    )
