"""Core strategy orchestration package.

Architectural role:
    Sits between the public service function and the lower-level protocol
    modules (`rpc`, `extraction`).

Composition:
    - `orchestrator`: ordered fallback across probing strategies.
    - `strategy_types`: tagged result variants produced by strategies.
    - `errors`: exception hierarchy shared by every layer.
"""
