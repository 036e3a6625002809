"""Implementations module for the mini program client."""

from .profile_store import InMemoryProfileStore, JsonFileProfileStore

__all__ = ["JsonFileProfileStore", "InMemoryProfileStore"]
