# tests/conftest.py
"""
Fixtures compartilhados para testes do Atlas Services.

Este módulo define fixtures reutilizáveis que fornecem:
- isolamento da configuração de processo entre testes
- um colaborador transacional que apenas registra chamadas
- um YAML de configuração semelhante ao uso real do projeto

Decisões arquiteturais:
    - A configuração de processo é resetada antes e depois de cada teste
    - O colaborador transacional usa duck typing em vez de herança
    - Serviços de teste são declarados nos próprios módulos de teste

Invariantes:
    - Nenhuma fixture executa serviço real
    - Nenhuma fixture realiza I/O fora de `tmp_path`

Limites explícitos:
    - Não substituir testes de integração
    - Não conter lógica de domínio
"""

import pytest

from atlas_services import config


@pytest.fixture(autouse=True)
def reset_process_config():
    """Garante que overrides de processo nunca vazam entre testes."""
    config.reset()
    yield
    config.reset()


class RecordingTransactionManager:
    """
    Colaborador transacional mínimo para testes.

    Registra cada chamada em `calls` como tuplas:
        ("begin", handle, nested) | ("commit", handle) | ("rollback", handle)
    """

    def __init__(self):
        self.calls = []
        self._next = 0

    def begin_scope(self, nested=False):
        self._next += 1
        handle = f"tx{self._next}"
        self.calls.append(("begin", handle, nested))
        return handle

    def commit(self, handle):
        self.calls.append(("commit", handle))

    def rollback(self, handle):
        self.calls.append(("rollback", handle))

    def actions(self):
        return [call[0] for call in self.calls]


@pytest.fixture
def tx_manager():
    """Colaborador transacional registrado na configuração de processo."""
    manager = RecordingTransactionManager()
    config.update(transaction_manager=manager)
    return manager


@pytest.fixture
def services_config_yaml() -> str:
    """
    YAML de defaults semelhante a um `config.defaults.yaml` real.

    Contém uma seção fora do engine (`app`) para garantir que apenas a
    seção `services` é aplicada.
    """
    return (
        "app:\n"
        "  name: billing\n"
        "services:\n"
        "  break_on_error: true\n"
        "  use_transactions: false\n"
        "  load_warnings: true\n"
    )
