"""
Engine do Atlas Services.

Este pacote contém a execução de uma invocação de serviço: a máquina de
estados que liga validação de campos, despacho de callbacks, o loop de
steps, o escopo transacional e a propagação de mensagens ao serviço pai.

Componentes principais:
    - engine      → `ExecutionEngine`, executor de uma invocação
    - transaction → `TransactionManager`, contrato do colaborador transacional

Princípios fundamentais:
    - A ordem de execução é a ordem efetiva dos steps declarados
    - Cada step é lançado no máximo uma vez por invocação
    - Mensagens de domínio só interrompem a execução conforme a política

Limites explícitos:
    - Não define serviços de domínio
    - Não implementa persistência nem retry
"""

from .engine import ExecutionEngine
from .transaction import TransactionManager

__all__ = ["ExecutionEngine", "TransactionManager"]
