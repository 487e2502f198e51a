# src/atlas_services/core/engine/transaction.py
"""
Contrato do colaborador transacional.

O engine não implementa persistência: quando transações estão habilitadas
(`use_transactions` e um `transaction_manager` configurado), o loop de steps
é envolvido por um escopo obtido deste colaborador.

    handle = manager.begin_scope(nested=...)
    ...
    manager.commit(handle) | manager.rollback(handle)

Invocações aninhadas (com serviço pai) pedem `nested=True`, permitindo ao
colaborador usar savepoints: o rollback do filho não desfaz o que o pai já
aplicou.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class TransactionManager(Protocol):
    def begin_scope(self, nested: bool = False) -> Any:
        ...

    def commit(self, handle: Any) -> None:
        ...

    def rollback(self, handle: Any) -> None:
        ...
