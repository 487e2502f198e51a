# src/atlas_services/core/config/errors.py
"""
Exceções canônicas da camada de configuração do Atlas Services.

Este módulo define a hierarquia de exceções utilizadas durante o
carregamento de arquivos de configuração e a composição das camadas
de política (processo < classe < chamada).

Invariantes:
    - Todas as exceções de configuração herdam de `ConfigError`
    - Nenhuma exceção representa erro de domínio ou de execução de step
"""


class ConfigError(Exception):
    """
    Exceção base para erros relacionados à configuração do Atlas Services.

    Permite captura genérica de falhas de configuração, separadas de
    falhas de definição de serviço e de execução.
    """


class ConfigFileNotFoundError(ConfigError):
    """Arquivo de configuração base (defaults) não encontrado."""


class UnsupportedConfigFormatError(ConfigError):
    """
    Formato de arquivo de configuração não suportado.

    Formatos suportados (v1):
        - YAML (.yaml, .yml)
        - JSON (.json)
    """


class InvalidConfigRootTypeError(ConfigError):
    """Conteúdo raiz (ou seção `services`) não é um dicionário."""


class ConfigTypeConflictError(ConfigError):
    """
    Conflito de tipos durante merge de configuração.

    Exemplo de conflito:
        - base:     {"break_on_error": true}
        - override: {"break_on_error": "yes"}

    Não há coerção: o valor precisa ter o tipo esperado pela chave.
    """


class UnknownConfigKeyError(ConfigError):
    """Chave de configuração não reconhecida pelo engine."""
