"""Persistent stores used by recipegen."""

from .recipe_store import RecipeStore, StoreListing, StoreWriteError

__all__ = ["RecipeStore", "StoreListing", "StoreWriteError"]
