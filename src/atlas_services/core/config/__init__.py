# src/atlas_services/core/config/__init__.py

"""
Camada de configuração do Atlas Services.

Responsabilidades do pacote:
    - Carregamento de arquivos de configuração (defaults + overrides locais)
    - Objeto de configuração de processo (`ServiceConfig`), resetável
    - Composição de camadas de política (processo < classe < chamada)

Invariantes:
    - Camadas de classe e de chamada nunca mutam a configuração de processo
    - Conflitos estruturais são tratados como erro
"""

from .errors import (
    ConfigError,
    ConfigFileNotFoundError,
    ConfigTypeConflictError,
    InvalidConfigRootTypeError,
    UnknownConfigKeyError,
    UnsupportedConfigFormatError,
)
from .settings import BOOL_KEYS, DEFAULTS, ServiceConfig, config

__all__ = [
    "BOOL_KEYS",
    "DEFAULTS",
    "ConfigError",
    "ConfigFileNotFoundError",
    "ConfigTypeConflictError",
    "InvalidConfigRootTypeError",
    "ServiceConfig",
    "UnknownConfigKeyError",
    "UnsupportedConfigFormatError",
    "config",
]
