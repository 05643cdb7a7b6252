"""
Data-access implementations of the EntityLoader protocol.

InMemoryEntityStore: In-memory store for testing and development
"""

from entityhydrator.loaders.in_memory import InMemoryEntityStore, detached_copy

__all__ = [
    "InMemoryEntityStore",
    "detached_copy",
]
