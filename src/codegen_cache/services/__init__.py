"""Service layer for business logic.

This layer contains the read-through-or-generate orchestration.
Services depend on protocols (interfaces), not concrete implementations,
making them testable and flexible.

Architecture:
    Handler -> Service -> Repository
    (HTTP)  -> (Business) -> (Data Access)

Usage:
    ```python
    from codegen_cache.services import MemoService

    service = MemoService.create(store=store, provider=provider)
    ```
"""

from .memo_service import MemoService

__all__ = [
    "MemoService",
]
