"""Infrastructure layer — catalog sources.

This layer is the only one that touches the filesystem.  Every raw I/O
or decode exception must be caught here and re-raised as a
:class:`~codecalc.exceptions.CodecalcError` subclass.

Rules
-----
* No imports from ``cli``.
* No user-facing output (no ``print()``, no Rich rendering).
* Must satisfy the protocols declared in :mod:`codecalc.core.protocols`.
"""

from codecalc.infra.json_catalog import JsonCatalogProvider, StaticCatalogProvider

__all__: list[str] = [
    "JsonCatalogProvider",
    "StaticCatalogProvider",
]
