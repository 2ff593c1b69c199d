"""Shared utilities — cross-cutting concerns such as logging setup.

Rules
-----
* No business logic.
* No imports from ``core``, ``infra`` or ``cli``.
* Importable by any layer.
"""
