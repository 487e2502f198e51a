"""
# Schema Core — Atlas Services

Compilação das declarações de um serviço (arguments, outputs, steps)
com herança, em mapas efetivos ordenados e somente leitura.

## Componentes

- **specs**: `FieldSpec`, `StepSpec`, `SchemaOperation`, `SchemaKind`
- **validation**: nomes válidos, nomes reservados, tipo obrigatório
- **definition**: `ServiceDefinition` (operações por classe + mapa efetivo memoizado)
"""

from .definition import ServiceDefinition, definition_of
from .specs import MISSING, FieldAccessor, FieldSpec, OperationAction, SchemaKind, SchemaOperation, StepSpec
from .validation import RESERVED_NAMES

__all__ = [
    "MISSING",
    "RESERVED_NAMES",
    "FieldAccessor",
    "FieldSpec",
    "OperationAction",
    "SchemaKind",
    "SchemaOperation",
    "ServiceDefinition",
    "StepSpec",
    "definition_of",
]
