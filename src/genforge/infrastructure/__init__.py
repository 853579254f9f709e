"""
genforge.infrastructure - Persistence Layer
===========================================

    - project_store: ProjectStore interface, InMemoryProjectStore, ProjectRecord
"""

from genforge.infrastructure.project_store import (
    InMemoryProjectStore,
    ProjectRecord,
    ProjectStore,
)

__all__ = [
    "InMemoryProjectStore",
    "ProjectRecord",
    "ProjectStore",
]
