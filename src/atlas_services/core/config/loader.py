# src/atlas_services/core/config/loader.py
"""
Loader canônico de configuração do Atlas Services.

Este módulo carrega a política de execução de processo a partir de arquivos:
    - um arquivo de defaults (obrigatório)
    - um arquivo local de overrides (opcional)

A política fica na seção `services` do arquivo:

    services:
      break_on_error: true
      use_transactions: false

Princípios fundamentais:
    - Configuração é declarativa e explícita
    - Erros estruturais são tratados como falhas fatais
    - Overrides locais nunca mutam os defaults

Limites explícitos:
    - Não aplica a configuração (responsabilidade de `ServiceConfig`)
    - Não valida chaves (responsabilidade de `merge_layers`)
"""

from pathlib import Path
from typing import Any, Dict, Optional
import json

import yaml  # PyYAML

from .merge import deep_merge
from .errors import (
    ConfigFileNotFoundError,
    InvalidConfigRootTypeError,
    UnsupportedConfigFormatError,
)

SECTION = "services"


def _load_file(path: Path) -> Dict[str, Any]:
    """
    Carrega um arquivo de configuração e valida sua estrutura básica.

    Decisões arquiteturais:
        - O arquivo deve existir no momento do carregamento
        - O conteúdo raiz deve ser um dicionário (`dict`)
        - Arquivos vazios são interpretados como dicionários vazios

    Raises:
        ConfigFileNotFoundError: Se o arquivo não existir.
        UnsupportedConfigFormatError: Se o formato do arquivo não for suportado.
        InvalidConfigRootTypeError: Se o conteúdo raiz não for um dicionário.
    """
    if not path.exists():
        raise ConfigFileNotFoundError(f"Arquivo de configuração não encontrado: {path}")

    suffix = path.suffix.lower()

    if suffix in {".yaml", ".yml"}:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)

    elif suffix == ".json":
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)

    else:
        raise UnsupportedConfigFormatError(f"Formato não suportado: {path.suffix}")

    if data is None:
        data = {}

    if not isinstance(data, dict):
        raise InvalidConfigRootTypeError(
            f"Config root deve ser dict, recebido: {type(data).__name__}"
        )

    return data


def load_config(
    *,
    defaults_path: str,
    local_path: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Carrega e resolve a seção `services` da configuração.

    Política de resolução:
        - O arquivo de defaults é obrigatório
        - O arquivo local é opcional e, quando existe, tem prioridade
        - A resolução utiliza `deep_merge`

    Returns:
        Dict[str, Any]: Conteúdo resolvido da seção `services` (pode ser vazio).

    Raises:
        ConfigFileNotFoundError: Se o arquivo de defaults não existir.
        UnsupportedConfigFormatError: Se o formato do arquivo não for suportado.
        InvalidConfigRootTypeError: Se o root ou a seção não forem dicionários.
        ConfigTypeConflictError: Se ocorrer conflito estrutural durante o merge.
    """
    effective = _load_file(Path(defaults_path))

    if local_path is not None:
        local_file = Path(local_path)
        if local_file.exists():
            effective = deep_merge(effective, _load_file(local_file))

    section = effective.get(SECTION) or {}
    if not isinstance(section, dict):
        raise InvalidConfigRootTypeError(
            f"Seção '{SECTION}' deve ser dict, recebido: {type(section).__name__}"
        )

    return section
