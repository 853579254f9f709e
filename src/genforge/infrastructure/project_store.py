"""
genforge.infrastructure.project_store - Project Persistence Layer
===================================================================

Stores named projects: a FileSet plus name, description and tags. A
successful PipelineResult (or a session's FileSet) is saved here so it can
be listed, searched, re-opened, exported and imported later.

Architecture Context:

    ┌──────────────────┐  save_result()  ┌──────────────────┐
    │ GenForge facade  │ ──────────────→ │  ProjectStore    │
    │                  │ ←── records ─── │  (abstract)      │
    └──────────────────┘                 └────────┬─────────┘
                                                  │
                                       ┌──────────▼───────────┐
                                       │ InMemoryProjectStore │
                                       └──────────────────────┘

Record Lifecycle:
    - save() of a new id stamps created_at and updated_at.
    - save() of an existing id keeps created_at and refreshes updated_at.
    - list_projects() returns the most recently updated first.

Usage:
    >>> store = InMemoryProjectStore()
    >>> record = await store.save(ProjectRecord(name="Todo", files=result.files))
    >>> [p.name for p in await store.search("todo")]
    ['Todo']
"""

from __future__ import annotations

import itertools
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Optional
from uuid import uuid4

import structlog
from pydantic import BaseModel, Field, ValidationError

from genforge.core.exceptions import GenForgeError, ProjectNotFoundError
from genforge.core.models import FileSet


# =============================================================================
# Logger
# =============================================================================
logger = structlog.get_logger()


def _generate_project_id() -> str:
    """Generate a unique project identifier like "proj-1f0c...". """
    return f"proj-{uuid4()}"


def _now() -> datetime:
    return datetime.now(timezone.utc)


# =============================================================================
# Project Record Model
# =============================================================================
class ProjectRecord(BaseModel):
    """A stored project.

    Attributes:
        project_id: Unique identifier (generated when omitted).
        name: Display name.
        description: Free-text description.
        files: The project's FileSet.
        tags: Free-form labels used by search().
        created_at: First save time (UTC). Preserved across re-saves.
        updated_at: Last save time (UTC).
    """

    project_id: str = Field(
        default_factory=_generate_project_id,
        description="Unique identifier for this project",
    )
    name: str = Field(min_length=1, description="Display name")
    description: str = Field(default="", description="Free-text description")
    files: FileSet = Field(default_factory=dict, description="Path → FileArtifact")
    tags: list[str] = Field(default_factory=list, description="Labels used by search")
    created_at: datetime = Field(default_factory=_now)
    updated_at: datetime = Field(default_factory=_now)

    def matches(self, query: str) -> bool:
        """Case-insensitive substring match on name, description and tags."""
        needle = query.lower()
        return (
            needle in self.name.lower()
            or needle in self.description.lower()
            or any(needle in tag.lower() for tag in self.tags)
        )


# =============================================================================
# Abstract Base Class
# =============================================================================
class ProjectStore(ABC):
    """Abstract interface for project persistence.

    Methods:
        save(record): Insert or update a project.
        get(project_id): Fetch one project, or None.
        list_projects(): All projects, most recently updated first.
        delete(project_id): Remove a project (unknown id raises).
        search(query): Projects whose name/description/tags contain query.
        count(): Number of stored projects.
    """

    @abstractmethod
    async def save(self, record: ProjectRecord) -> ProjectRecord:
        """Insert or update ``record`` and return the stored version.

        When a project with the same id exists, its ``created_at`` is kept
        and ``updated_at`` is refreshed.
        """
        ...

    @abstractmethod
    async def get(self, project_id: str) -> Optional[ProjectRecord]:
        ...

    @abstractmethod
    async def list_projects(self) -> list[ProjectRecord]:
        ...

    @abstractmethod
    async def delete(self, project_id: str) -> None:
        """Remove a project.

        Raises:
            ProjectNotFoundError: If no project has this id.
        """
        ...

    @abstractmethod
    async def count(self) -> int:
        ...

    async def search(self, query: str) -> list[ProjectRecord]:
        """Return matching projects, most recently updated first.

        An empty query matches every project.
        """
        return [record for record in await self.list_projects() if record.matches(query)]

    # =========================================================================
    # Export / Import
    # =========================================================================

    async def export_project(self, project_id: str) -> str:
        """Serialize a stored project to a JSON document.

        Raises:
            ProjectNotFoundError: If no project has this id.
        """
        record = await self.get(project_id)
        if record is None:
            raise ProjectNotFoundError(project_id)
        return record.model_dump_json(indent=2)

    async def import_project(self, document: str) -> ProjectRecord:
        """Store a project exported by ``export_project()`` as a new project.

        The imported copy gets a fresh id, fresh timestamps and an
        " (Imported)" name suffix.

        Raises:
            GenForgeError: If ``document`` is not a valid project export
                (error_code INVALID_PROJECT_FILE).
        """
        try:
            source = ProjectRecord.model_validate_json(document)
        except ValidationError as e:
            raise GenForgeError(
                message="Invalid project file",
                error_code="INVALID_PROJECT_FILE",
                details={"error_count": e.error_count()},
            ) from e

        imported = ProjectRecord(
            name=f"{source.name} (Imported)",
            description=source.description,
            files=source.files,
            tags=list(source.tags),
        )
        return await self.save(imported)


# =============================================================================
# In-Memory Implementation
# =============================================================================
class InMemoryProjectStore(ProjectStore):
    """Dict-backed project store for development and testing.

    Data is lost when the process exits.
    """

    def __init__(self) -> None:
        self._store: dict[str, ProjectRecord] = {}
        # Save order breaks ties between identical updated_at timestamps.
        self._save_sequence: dict[str, int] = {}
        self._counter = itertools.count()
        self._logger = logger.bind(component="in_memory_project_store")

    async def save(self, record: ProjectRecord) -> ProjectRecord:
        now = _now()
        existing = self._store.get(record.project_id)
        created_at = existing.created_at if existing is not None else record.created_at
        stored = record.model_copy(update={"created_at": created_at, "updated_at": now})

        self._store[stored.project_id] = stored
        self._save_sequence[stored.project_id] = next(self._counter)
        self._logger.debug(
            "project_saved",
            project_id=stored.project_id,
            file_count=len(stored.files),
            updated=existing is not None,
        )
        return stored

    async def get(self, project_id: str) -> Optional[ProjectRecord]:
        return self._store.get(project_id)

    async def list_projects(self) -> list[ProjectRecord]:
        return sorted(
            self._store.values(),
            key=lambda r: (r.updated_at, self._save_sequence[r.project_id]),
            reverse=True,
        )

    async def delete(self, project_id: str) -> None:
        if project_id not in self._store:
            raise ProjectNotFoundError(project_id)
        del self._store[project_id]
        del self._save_sequence[project_id]
        self._logger.debug("project_deleted", project_id=project_id)

    async def count(self) -> int:
        return len(self._store)

    async def clear(self) -> None:
        """Remove every stored project."""
        self._store.clear()
        self._save_sequence.clear()
