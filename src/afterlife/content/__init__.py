"""Narrative content for Shadow Afterlife."""

from .provider import (
    NPC_CATEGORY,
    ContentProvider,
    MemoryContentProvider,
    YamlContentProvider,
    daily_category,
    explore_category,
    generic_story,
)

__all__ = [
    "NPC_CATEGORY",
    "ContentProvider",
    "MemoryContentProvider",
    "YamlContentProvider",
    "daily_category",
    "explore_category",
    "generic_story",
]
