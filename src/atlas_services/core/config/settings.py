# src/atlas_services/core/config/settings.py
"""
Política de execução de processo do Atlas Services.

`ServiceConfig` é o objeto de configuração de processo: guarda os toggles
padrão de todas as invocações. Classes de serviço e chamadas individuais
sobrepõem camadas sem mutar este objeto (ver `resolve`).

Precedência (da menor para a maior):
    processo < override de classe mais próximo na cadeia de herança < chamada
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

from .loader import load_config
from .merge import merge_layers

DEFAULTS: Dict[str, Any] = {
    "require_arg_type": True,
    "require_output_type": True,
    "use_transactions": True,
    "transaction_manager": None,

    "load_errors": True,
    "break_on_error": True,
    "raise_on_error": False,
    "rollback_on_error": True,

    "load_warnings": True,
    "break_on_warning": False,
    "raise_on_warning": False,
    "rollback_on_warning": False,

    # Sobrescrevem a política do pai ao propagar mensagens (None = política do pai)
    "self_break_on_error": None,
    "self_rollback_on_error": None,
    "self_break_on_warning": None,
    "self_rollback_on_warning": None,
}

BOOL_KEYS = frozenset(
    key for key, value in DEFAULTS.items() if isinstance(value, bool)
) | {
    "self_break_on_error",
    "self_rollback_on_error",
    "self_break_on_warning",
    "self_rollback_on_warning",
}


def _expand_aliases(values: Mapping[str, Any]) -> Dict[str, Any]:
    # `require_type` ajusta argumentos e outputs de uma vez
    expanded = dict(values)
    if "require_type" in expanded:
        flag = expanded.pop("require_type")
        expanded.setdefault("require_arg_type", flag)
        expanded.setdefault("require_output_type", flag)
    return expanded


class ServiceConfig:
    """
    Configuração de processo (mutável, resetável).

    Exemplo:
        config.update(use_transactions=False)
        config.reset()
    """

    def __init__(self) -> None:
        self._values: Dict[str, Any] = dict(DEFAULTS)

    def __getattr__(self, name: str) -> Any:
        values = self.__dict__.get("_values")
        if values is not None and name in values:
            return values[name]
        raise AttributeError(name)

    def __setattr__(self, name: str, value: Any) -> None:
        if name.startswith("_"):
            super().__setattr__(name, value)
        else:
            self.update(**{name: value})

    def update(self, **values: Any) -> None:
        # Atualização atômica: em caso de erro, nada é aplicado
        self._values = merge_layers(
            self._values,
            [_expand_aliases(values)],
            bool_keys=BOOL_KEYS,
        )
        for key, value in values.items():
            # merge_layers ignora None; aqui None é explícito (ex.: desligar manager)
            if value is None and key in self._values:
                self._values[key] = None

    def reset(self) -> None:
        """Restaura todos os toggles para `DEFAULTS` (isolamento entre testes)."""
        self._values = dict(DEFAULTS)

    def to_dict(self) -> Dict[str, Any]:
        return dict(self._values)

    def merge(self, overrides: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
        return merge_layers(self._values, [_expand_aliases(overrides or {})], bool_keys=BOOL_KEYS)

    def resolve(self, *layers: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
        """Snapshot efetivo após aplicar as camadas em ordem de precedência."""
        return merge_layers(
            self._values,
            [_expand_aliases(layer) for layer in layers if layer],
            bool_keys=BOOL_KEYS,
        )

    def load_file(self, defaults_path: str, local_path: Optional[str] = None) -> None:
        """Carrega a seção `services` de um arquivo YAML/JSON e aplica via `update`."""
        self.update(**load_config(defaults_path=defaults_path, local_path=local_path))


config = ServiceConfig()
