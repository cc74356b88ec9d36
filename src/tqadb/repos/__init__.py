"""Repository layer.

Repositories shape queries and fold rows into domain values; transaction
scope comes from the runner they are constructed with.
"""

from tqadb.repos.entrypoints import EntrypointRepo, EntrypointRepository, group_entrypoints

__all__ = [
    "EntrypointRepo",
    "EntrypointRepository",
    "group_entrypoints",
]
