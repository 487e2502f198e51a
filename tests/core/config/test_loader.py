# tests/core/config/test_loader.py
"""
Testes do carregador de configuração (load_config).

Os testes asseguram que:
- o arquivo defaults é obrigatório
- o arquivo local é opcional e tem prioridade
- apenas a seção `services` é retornada
- formatos e estruturas inválidas são rejeitados

Limites explícitos:
    - Não valida a aplicação da configuração (ver test_settings.py)
"""

import json
from pathlib import Path

import pytest

from atlas_services.core.config.errors import (
    ConfigFileNotFoundError,
    InvalidConfigRootTypeError,
    UnsupportedConfigFormatError,
)
from atlas_services.core.config.loader import load_config


def test_missing_defaults_raises(tmp_path: Path):
    with pytest.raises(ConfigFileNotFoundError):
        load_config(defaults_path=str(tmp_path / "missing.yaml"))


def test_defaults_only_returns_services_section(tmp_path: Path, services_config_yaml: str):
    defaults = tmp_path / "config.defaults.yaml"
    defaults.write_text(services_config_yaml, encoding="utf-8")

    section = load_config(defaults_path=str(defaults))

    assert section == {"break_on_error": True, "use_transactions": False, "load_warnings": True}


def test_local_overrides_defaults(tmp_path: Path, services_config_yaml: str):
    """
    Verifica que o arquivo local sobrescreve o defaults via deep-merge.

    Invariantes:
        - Chaves não sobrescritas permanecem do defaults
        - Um arquivo local ausente é ignorado silenciosamente
    """
    defaults = tmp_path / "config.defaults.yaml"
    defaults.write_text(services_config_yaml, encoding="utf-8")
    local = tmp_path / "config.local.json"
    local.write_text(json.dumps({"services": {"break_on_error": False}}), encoding="utf-8")

    section = load_config(defaults_path=str(defaults), local_path=str(local))
    assert section["break_on_error"] is False
    assert section["use_transactions"] is False

    untouched = load_config(defaults_path=str(defaults), local_path=str(tmp_path / "nope.yaml"))
    assert untouched["break_on_error"] is True


def test_empty_file_yields_empty_section(tmp_path: Path):
    defaults = tmp_path / "empty.yml"
    defaults.write_text("", encoding="utf-8")

    assert load_config(defaults_path=str(defaults)) == {}


def test_unsupported_format_raises(tmp_path: Path):
    defaults = tmp_path / "config.toml"
    defaults.write_text("[services]\n", encoding="utf-8")

    with pytest.raises(UnsupportedConfigFormatError):
        load_config(defaults_path=str(defaults))


def test_non_dict_root_raises(tmp_path: Path):
    defaults = tmp_path / "config.yaml"
    defaults.write_text("- a\n- b\n", encoding="utf-8")

    with pytest.raises(InvalidConfigRootTypeError):
        load_config(defaults_path=str(defaults))


def test_non_dict_section_raises(tmp_path: Path):
    defaults = tmp_path / "config.yaml"
    defaults.write_text("services: enabled\n", encoding="utf-8")

    with pytest.raises(InvalidConfigRootTypeError):
        load_config(defaults_path=str(defaults))
