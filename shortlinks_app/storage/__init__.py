"""
Registry storage for short links and their click analytics.

This module implements the Strategy Pattern so the in-memory registry can be
swapped for another backend without touching the service layer.
"""

from .strategies import RegistryStore, InMemoryRegistryStore, StoredStats

__all__ = [
    "RegistryStore",
    "InMemoryRegistryStore",
    "StoredStats",
]
