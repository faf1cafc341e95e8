# src/rf2_dataflow/core/__init__.py
"""
Core do RF2 DataFlow.

Reúne as responsabilidades transversais que não dependem do formato RF2:
    - config       → resolução de configuração (merge, validação estrutural, hashing)
    - pipeline     → protocolo de Step, contexto de execução e registry
    - engine       → planejamento (DAG) e execução controlada do pipeline
    - errors       → payloads canônicos de erro
    - exceptions   → exceções tipadas

Princípios fundamentais:
    - Nenhuma decisão silenciosa: todo comportamento é explícito e testado
    - Falhas de I/O e de configuração interrompem a operação corrente
    - Problemas de conteúdo são reportados, nunca levantados
"""
