"""Collection services package."""

from .registry import CollectionRegistry, CollectionRegistryBuilder, build_registry

__all__ = [
    "CollectionRegistry",
    "CollectionRegistryBuilder",
    "build_registry",
]
