# src/atlas_services/core/__init__.py
"""
Core do Atlas Services.

Este pacote reúne a implementação canônica do engine de serviços: a
compilação das declarações, o armazenamento tipado de campos, o acúmulo de
mensagens de domínio, o despacho de callbacks e a máquina de execução.

Componentes principais:
    - schema     → compilação de arguments/outputs/steps com herança
    - types      → adaptadores de validação de tipo (isinstance, pydantic)
    - collection → armazenamento tipado de argumentos e outputs
    - messages   → errors/warnings com política break/raise/rollback
    - callbacks  → registro e despacho de hooks (simples e around)
    - pipeline   → contexto e sinais de uma invocação
    - engine     → execução de uma invocação
    - config     → política de processo e composição de camadas

Princípios fundamentais:
    - Erros de definição surgem antes de qualquer invocação
    - Nenhuma decisão silenciosa: todo comportamento é explícito e testado
    - Estado de uma invocação nunca vaza para outra

Limites explícitos:
    - Não implementa persistência (colaborador transacional externo)
    - Não contém geradores, lint ou matchers de teste
"""
