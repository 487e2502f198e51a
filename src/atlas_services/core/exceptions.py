"""
Atlas Services — Canonical Exceptions (v1)

Este módulo define as exceções tipadas do Atlas Services.

Objetivo:
- Separar falhas de definição (DSL inválida) de falhas de execução
- Carregar dados estruturados (`details`) e uma dica acionável (`hint`)
- Evitar ValueError/RuntimeError genéricos em guardrails críticos

Regras:
- Erros de definição surgem antes de qualquer invocação (fail fast)
- Erros de tipo surgem na fase de validação e nunca são coletados como Message
- Mensagens de domínio (errors/warnings) só viram exceção via política raise-on-add
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass(eq=False)
class ServiceError(Exception):
    """Base class para exceções do Atlas Services.

    Importante:
    - Sempre carregar dados estruturados em `details`
    - Mensagem deve ser curta e humana
    """

    message: str
    details: Dict[str, Any] = field(default_factory=dict)
    hint: Optional[str] = None

    def __str__(self) -> str:
        return self.message


# ---------------------------------------------------------------------------
# Definição (DSL)
# ---------------------------------------------------------------------------

@dataclass(eq=False)
class DefinitionError(ServiceError):
    """Uso inválido da DSL de declaração de serviços."""


@dataclass(eq=False)
class InvalidNameError(DefinitionError):
    """Nome de argumento/output/step não é um identificador atômico."""


@dataclass(eq=False)
class ReservedNameError(DefinitionError):
    """Nome colide com um nome reservado do engine."""


@dataclass(eq=False)
class NameConflictError(DefinitionError):
    """Nome já existe como outro tipo (argumento vs output vs step)."""


@dataclass(eq=False)
class DuplicateNameError(DefinitionError):
    """Nome declarado duas vezes na mesma classe."""


@dataclass(eq=False)
class MissingTypeError(DefinitionError):
    """Campo sem tipo quando a política exige tipos."""


@dataclass(eq=False)
class AnchorNotFoundError(DefinitionError):
    """Âncora `before`/`after` inexistente no mapa efetivo de steps."""


@dataclass(eq=False)
class ConditionConflictError(DefinitionError):
    """`if_` e `unless` declarados ao mesmo tempo para um step."""


@dataclass(eq=False)
class StepLookupError(DefinitionError):
    """Step declarado sem callable resolvível."""


@dataclass(eq=False)
class NoStepsError(DefinitionError):
    """Serviço invocado sem nenhum step efetivo."""


# ---------------------------------------------------------------------------
# Tipos
# ---------------------------------------------------------------------------

@dataclass(eq=False)
class FieldTypeError(ServiceError):
    """Valor armazenado rejeitado pelo validador de tipo do campo."""


@dataclass(eq=False)
class ArgumentTypeError(FieldTypeError):
    """Argumento com valor incompatível com o tipo declarado."""


@dataclass(eq=False)
class OutputTypeError(FieldTypeError):
    """Output com valor incompatível com o tipo declarado."""


# ---------------------------------------------------------------------------
# Mensagens
# ---------------------------------------------------------------------------

@dataclass(eq=False)
class RaisedMessageError(ServiceError):
    """Mensagem adicionada a um log com política raise-on-add ativa."""

    key: str = "base"
    text: str = ""
