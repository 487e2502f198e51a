# src/atlas_services/core/config/merge.py
"""
Utilitários de merge de configuração.

Este módulo implementa as duas políticas de merge usadas pelo Atlas Services:

    - `deep_merge`: resolve arquivos de configuração (defaults + local)
    - `merge_layers`: compõe as camadas de política de execução
      (processo < classe < chamada)

Política de deep-merge (v1):
    - dict → merge recursivo por chave
    - list → sobrescrita total (sem merge elemento a elemento)
    - escalar → sobrescrita direta
    - conflito de tipos → erro estrutural explícito

Política de camadas (v1):
    - chaves desconhecidas → erro explícito
    - `None` em uma camada não sobrescreve o valor anterior
    - toggles booleanos aceitam apenas `bool`
    - valores não são copiados (colaboradores externos, como o gerenciador
      de transações, são compartilhados por referência)

Invariantes:
    - Nenhum input é mutado durante o processo
    - A mesma entrada sempre produz a mesma saída
"""

from copy import deepcopy
from typing import Any, Dict, Iterable, Mapping, Optional

from .errors import ConfigTypeConflictError, UnknownConfigKeyError


def deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """
    Realiza um deep-merge determinístico entre dois dicionários de configuração.

    Esta função combina uma configuração base com um conjunto de overrides
    explícitos, produzindo uma nova estrutura resultante sem mutar
    nenhum dos inputs.

    Args:
        base (Dict[str, Any]): Configuração base (ex.: defaults).
        override (Dict[str, Any]): Overrides explícitos da configuração.

    Returns:
        Dict[str, Any]: Nova configuração resultante do deep-merge.

    Raises:
        ConfigTypeConflictError: Se ocorrer conflito de tipo entre base e override.
    """

    if not isinstance(base, dict) or not isinstance(override, dict):
        raise ConfigTypeConflictError(
            f"Deep-merge requer dicts no nível raiz, recebido: "
            f"{type(base).__name__} vs {type(override).__name__}"
        )

    result: Dict[str, Any] = deepcopy(base)

    for key, override_value in override.items():
        if key not in result or result[key] is None:
            result[key] = deepcopy(override_value)
            continue

        base_value = result[key]

        if isinstance(base_value, dict) and isinstance(override_value, dict):
            result[key] = deep_merge(base_value, override_value)
            continue

        if isinstance(override_value, list):
            result[key] = deepcopy(override_value)
            continue

        if override_value is not None and type(base_value) is not type(override_value):
            raise ConfigTypeConflictError(
                f"Conflito de tipo na chave '{key}': "
                f"{type(base_value).__name__} vs {type(override_value).__name__}"
            )

        result[key] = deepcopy(override_value)

    return result


def merge_layers(
    base: Mapping[str, Any],
    layers: Iterable[Optional[Mapping[str, Any]]],
    *,
    bool_keys: Iterable[str] = (),
) -> Dict[str, Any]:
    """
    Compõe camadas de política sobre uma base, da menos para a mais específica.

    Args:
        base: snapshot completo (ex.: configuração de processo).
        layers: overrides em ordem de precedência crescente; `None` é ignorado.
        bool_keys: chaves cujo valor precisa ser `bool`.

    Raises:
        UnknownConfigKeyError: chave ausente na base.
        ConfigTypeConflictError: toggle booleano com valor não booleano.
    """
    result: Dict[str, Any] = dict(base)
    flags = set(bool_keys)

    for layer in layers:
        if not layer:
            continue
        for key, value in layer.items():
            if key not in result:
                raise UnknownConfigKeyError(f"Chave de configuração desconhecida: '{key}'")
            if value is None:
                continue
            if key in flags and not isinstance(value, bool):
                raise ConfigTypeConflictError(
                    f"Chave '{key}' exige bool, recebido: {type(value).__name__}"
                )
            result[key] = value

    return result
