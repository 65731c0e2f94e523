"""Public interface package.

Architectural role:
    - `service`: `ai_function`, the canonical prompt/model -> answer entrypoint.
    - `main`: process entry point (environment, optional database, logging).
"""
