from .builder import (
    DependencyGraph,
    DependencyGraphBuilder,
    FileDependencies,
    isolated_files,
)
from .store import CodeIndexStore

__all__ = [
    "CodeIndexStore",
    "DependencyGraph",
    "DependencyGraphBuilder",
    "FileDependencies",
    "isolated_files",
]
