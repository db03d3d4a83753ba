"""Metadata caching and discovery."""

from namerec.dbtree.metadata.cache import MetadataCache

__all__ = [
    'MetadataCache',
]
