"""
Atlas Services — Engine declarativo de serviços sequenciais.

Um serviço declara argumentos tipados, outputs tipados e uma lista ordenada
de steps. O engine compila a declaração (com herança), valida os campos,
executa os steps com condições e steps `always`, acumula errors/warnings
de domínio, propaga contexto para invocações aninhadas e envolve o loop de
steps em um escopo transacional fornecido pelo chamador.

Superfície pública:
    - Service, Argument, Output, step, callback
    - ServiceInvoker (via `Service.using`)
    - config (ServiceConfig de processo)
    - adaptadores de tipo: InstanceOf, AnyOf, Nilable, OneOf, Coerce
"""

from atlas_services.core.config import ServiceConfig, config
from atlas_services.core.engine import TransactionManager
from atlas_services.core.exceptions import (
    AnchorNotFoundError,
    ArgumentTypeError,
    ConditionConflictError,
    DefinitionError,
    DuplicateNameError,
    FieldTypeError,
    InvalidNameError,
    MissingTypeError,
    NameConflictError,
    NoStepsError,
    OutputTypeError,
    RaisedMessageError,
    ReservedNameError,
    ServiceError,
    StepLookupError,
)
from atlas_services.core.messages import Message, MessageLog
from atlas_services.core.types import AnyOf, Coerce, InstanceOf, Nilable, OneOf
from atlas_services.invoker import ServiceInvoker
from atlas_services.service import Argument, Output, Service, callback, step

__all__ = [
    "AnchorNotFoundError",
    "AnyOf",
    "Argument",
    "ArgumentTypeError",
    "Coerce",
    "ConditionConflictError",
    "DefinitionError",
    "DuplicateNameError",
    "FieldTypeError",
    "InstanceOf",
    "InvalidNameError",
    "Message",
    "MessageLog",
    "MissingTypeError",
    "NameConflictError",
    "Nilable",
    "NoStepsError",
    "OneOf",
    "Output",
    "OutputTypeError",
    "RaisedMessageError",
    "ReservedNameError",
    "Service",
    "ServiceConfig",
    "ServiceError",
    "ServiceInvoker",
    "StepLookupError",
    "TransactionManager",
    "callback",
    "config",
    "step",
]
