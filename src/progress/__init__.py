"""
Progress tracking: curriculum config, persistence transport and the store.
"""

from src.progress.curriculum import DEFAULT_CURRICULUM, Curriculum, get_curriculum, load_curriculum
from src.progress.persistence import JsonFilePersistence, MemoryPersistence, Persistence
from src.progress.store import GroupStats, ProgressChange, ProgressStore, deep_merge

__all__ = [
    "Curriculum",
    "DEFAULT_CURRICULUM",
    "GroupStats",
    "JsonFilePersistence",
    "MemoryPersistence",
    "Persistence",
    "ProgressChange",
    "ProgressStore",
    "deep_merge",
    "get_curriculum",
    "load_curriculum",
]
