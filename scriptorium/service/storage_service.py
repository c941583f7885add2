# -*- coding: utf-8 -*-
# @file storage_service.py
# @brief Storage gateway: per-collection CRUD, cascading deletes, export, settings
# @author sailing-innocent
# @date 2026-10-19

import asyncio
import logging
from typing import Awaitable, Callable, Dict, Generic, List, Optional, Sequence, Type, TypeVar

from pydantic import BaseModel, ValidationError
from sqlalchemy import JSON, delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from scriptorium.config import StorageConfig
from scriptorium.data.errors import StorageError, StorageTimeoutError
from scriptorium.data.orm import SETTINGS_KEY
from scriptorium.db import Database
from scriptorium.model import (
    Workspace,
    Project,
    Book,
    Document,
    Group,
    Character,
    Relationship,
    Location,
    WorldEvent,
    WorldRule,
    Note,
    PlotStructure,
    Beat,
    Theme,
    Conflict,
    BStory,
    AppSettingsRow,
)
from scriptorium.data.schemas import (
    WorkspaceRecord,
    ProjectRecord,
    BookRecord,
    DocumentRecord,
    GroupRecord,
    CharacterRecord,
    RelationshipRecord,
    LocationRecord,
    WorldEventRecord,
    WorldRuleRecord,
    NoteRecord,
    PlotStructureRecord,
    BeatRecord,
    ThemeRecord,
    ConflictRecord,
    BStoryRecord,
    AppSettings,
    ProjectBundle,
)
from scriptorium.service.cascade import CascadeBatch

logger = logging.getLogger(__name__)

R = TypeVar("R", bound=BaseModel)
T = TypeVar("T")

BOOK_SCOPES = ("project_id", "book_id", "workspace_id")

# Collections removed together with their book
BOOK_DEPENDENTS = (Document, Group, Note, PlotStructure)

# Every collection carrying a project_id, books included
PROJECT_DEPENDENTS = (
    Book,
    Document,
    Group,
    Character,
    Relationship,
    Location,
    WorldEvent,
    WorldRule,
    Note,
    PlotStructure,
    Beat,
    Theme,
    Conflict,
    BStory,
)


class RecordStore(Generic[R]):
    """CRUD accessor for one collection.

    Args:
        gateway: Owning gateway, which supplies sessions, locking and timeouts
        name: Collection name used in logs and errors
        model: ORM model backing the collection
        schema: pydantic record type read and written by callers
        scopes: Indexed owner columns that ``get_all`` may filter on;
            the first one is the default
        unscoped: Whether ``get_all(None)`` may list the whole collection
    """

    def __init__(
        self,
        gateway: "StorageGateway",
        name: str,
        model,
        schema: Type[R],
        scopes: Sequence[str] = (),
        unscoped: bool = False,
    ):
        self.gateway = gateway
        self.name = name
        self.model = model
        self.schema = schema
        self.scopes = tuple(scopes)
        self.unscoped = unscoped

    def __repr__(self):
        return f"RecordStore({self.name!r}, scopes={self.scopes})"

    def _scope_column(self, by: Optional[str]):
        if by is None:
            if not self.scopes:
                raise ValueError(f"Collection {self.name} has no owning-scope index")
            by = self.scopes[0]
        if by not in self.scopes:
            raise ValueError(
                f"Collection {self.name} is not indexed by {by!r}; "
                f"expected one of {', '.join(self.scopes)}"
            )
        return getattr(self.model, by)

    def to_row(self, record: R):
        data = record.model_dump()
        json_data = record.model_dump(mode="json")
        values = {}
        for column in self.model.__table__.columns:
            source = json_data if isinstance(column.type, JSON) else data
            values[column.key] = source[column.key]
        return self.model(**values)

    def to_record(self, row) -> R:
        return self.schema.model_validate(row)

    # ============ Session-level helpers (used inside gateway transactions) ============

    def _list_query(self, scope_id: Optional[str], by: Optional[str]):
        query = select(self.model)
        if scope_id is None and by is None and self.unscoped:
            return query
        if scope_id is None:
            raise ValueError(f"Collection {self.name} requires an owner id")
        return query.where(self._scope_column(by) == scope_id)

    async def fetch_all(
        self, session: AsyncSession, scope_id: Optional[str] = None, by: Optional[str] = None
    ) -> List[R]:
        rows = (await session.execute(self._list_query(scope_id, by))).scalars().all()
        return [self.to_record(row) for row in rows]

    async def fetch(self, session: AsyncSession, record_id: str) -> Optional[R]:
        row = await session.get(self.model, record_id)
        if row is None:
            return None
        return self.to_record(row)

    async def put(self, session: AsyncSession, record: R) -> R:
        await session.merge(self.to_row(record))
        return record

    async def remove(self, session: AsyncSession, record_id: str) -> bool:
        row = await session.get(self.model, record_id)
        if row is None:
            return False
        await session.delete(row)
        return True

    # ============ Public operations ============

    async def get_all(self, scope_id: Optional[str] = None, by: Optional[str] = None) -> List[R]:
        """Every record whose ``by`` index equals scope_id; empty when none"""
        query = self._list_query(scope_id, by)

        async def operation(session: AsyncSession) -> List[R]:
            rows = (await session.execute(query)).scalars().all()
            return [self.to_record(row) for row in rows]

        return await self.gateway.run(f"get_all {self.name}", operation)

    async def get(self, record_id: str) -> Optional[R]:
        return await self.gateway.run(
            f"get {self.name}", lambda session: self.fetch(session, record_id)
        )

    async def get_first(self, scope_id: str, by: Optional[str] = None) -> Optional[R]:
        """First record under scope_id, for one-per-owner collections"""
        column = self._scope_column(by)

        async def operation(session: AsyncSession) -> Optional[R]:
            row = (
                await session.execute(select(self.model).where(column == scope_id).limit(1))
            ).scalar_one_or_none()
            return self.to_record(row) if row is not None else None

        return await self.gateway.run(f"get_first {self.name}", operation)

    async def save(self, record: R) -> R:
        """Insert or fully overwrite the record with the same id"""
        if not isinstance(record, self.schema):
            record = self.schema.model_validate(record)

        saved = await self.gateway.run(
            f"save {self.name}", lambda session: self.put(session, record), write=True
        )
        logger.debug("Saved %s %s", self.name, record.id)
        return saved

    async def delete(self, record_id: str) -> None:
        """Delete one record; a missing id is not an error"""
        await self.gateway.run(
            f"delete {self.name}", lambda session: self.remove(session, record_id), write=True
        )
        logger.debug("Deleted %s %s", self.name, record_id)

    async def delete_all(self, scope_id: str, by: Optional[str] = None) -> int:
        """Delete every record whose ``by`` index equals scope_id; returns the count"""
        column = self._scope_column(by)

        async def operation(session: AsyncSession) -> int:
            result = await session.execute(delete(self.model).where(column == scope_id))
            return max(result.rowcount or 0, 0)

        removed = await self.gateway.run(f"delete_all {self.name}", operation, write=True)
        logger.debug("Deleted %d %s under %s", removed, self.name, scope_id)
        return removed


class StorageGateway:
    """Single entry point to the embedded store.

    Each collection is a :class:`RecordStore` attribute (``gateway.documents``,
    ``gateway.characters``...). Writes are serialized on one lock; reads run
    concurrently. Every operation runs inside one transaction and under the
    configured timeout, and any failure surfaces as :class:`StorageError`.
    """

    def __init__(self, config: StorageConfig, database: Optional[Database] = None):
        self.config = config
        self.database = database or Database(config)
        self._write_lock = asyncio.Lock()

        self.workspaces = RecordStore(
            self, "workspaces", Workspace, WorkspaceRecord, unscoped=True
        )
        self.projects = RecordStore(
            self, "projects", Project, ProjectRecord, ("workspace_id",), unscoped=True
        )
        self.books = RecordStore(
            self, "books", Book, BookRecord, ("project_id", "workspace_id")
        )
        self.documents = RecordStore(
            self, "documents", Document, DocumentRecord, BOOK_SCOPES + ("group_id",)
        )
        self.groups = RecordStore(self, "groups", Group, GroupRecord, BOOK_SCOPES)
        self.characters = RecordStore(
            self, "characters", Character, CharacterRecord, BOOK_SCOPES
        )
        self.relationships = RecordStore(
            self, "relationships", Relationship, RelationshipRecord, BOOK_SCOPES
        )
        self.locations = RecordStore(
            self, "locations", Location, LocationRecord, BOOK_SCOPES
        )
        self.world_events = RecordStore(
            self, "world_events", WorldEvent, WorldEventRecord, BOOK_SCOPES
        )
        self.world_rules = RecordStore(
            self, "world_rules", WorldRule, WorldRuleRecord, BOOK_SCOPES
        )
        self.notes = RecordStore(self, "notes", Note, NoteRecord, BOOK_SCOPES)
        self.plot_structures = RecordStore(
            self, "plot_structures", PlotStructure, PlotStructureRecord, BOOK_SCOPES
        )
        self.beats = RecordStore(self, "beats", Beat, BeatRecord, ("project_id",))
        self.themes = RecordStore(
            self, "themes", Theme, ThemeRecord, ("project_id",)
        )
        self.conflicts = RecordStore(
            self, "conflicts", Conflict, ConflictRecord, ("project_id",)
        )
        self.b_stories = RecordStore(
            self, "b_stories", BStory, BStoryRecord, ("project_id",)
        )

    @property
    def stores(self) -> Dict[str, RecordStore]:
        return {
            name: value for name, value in vars(self).items() if isinstance(value, RecordStore)
        }

    @property
    def state(self) -> str:
        return self.database.state

    async def close(self) -> None:
        await self.database.close()

    # ============ Execution ============

    async def run(
        self,
        label: str,
        operation: Callable[[AsyncSession], Awaitable[T]],
        write: bool = False,
    ) -> T:
        """Run operation in one transaction, under the operation timeout"""
        timeout = self.config.op_timeout
        try:
            return await asyncio.wait_for(self._execute(operation, write), timeout=timeout)
        except asyncio.TimeoutError as e:
            logger.error("%s timed out after %ss", label, timeout)
            raise StorageTimeoutError(f"{label} timed out after {timeout}s", cause=e) from e
        except StorageError:
            raise
        except (SQLAlchemyError, ValidationError, OSError) as e:
            logger.error("%s failed: %s", label, e)
            raise StorageError(f"{label} failed: {e}", cause=e) from e

    async def _execute(self, operation, write: bool):
        sessionmaker = await self.database.ensure_ready()
        if write:
            async with self._write_lock:
                async with sessionmaker() as session:
                    async with session.begin():
                        return await operation(session)
        async with sessionmaker() as session:
            async with session.begin():
                return await operation(session)

    async def commit_batch(self, batch: CascadeBatch) -> int:
        """Apply a cascade batch in one write transaction"""
        removed = await self.run(batch.label, batch.apply, write=True)
        logger.info("%s removed %d records in %d steps", batch.label, removed, len(batch))
        return removed

    # ============ Cascading deletes ============

    def plan_project_delete(self, project_id: str) -> CascadeBatch:
        batch = CascadeBatch(f"delete project {project_id}")
        batch.delete_where(Project, "id", project_id)
        for model in PROJECT_DEPENDENTS:
            batch.delete_where(model, "project_id", project_id)
        return batch

    def plan_book_delete(self, book_id: str) -> CascadeBatch:
        batch = CascadeBatch(f"delete book {book_id}")
        batch.delete_where(Book, "id", book_id)
        for model in BOOK_DEPENDENTS:
            batch.delete_where(model, "book_id", book_id)
        return batch

    def plan_workspace_delete(self, workspace_id: str, project_ids: Sequence[str]) -> CascadeBatch:
        batch = CascadeBatch(f"delete workspace {workspace_id}")
        batch.delete_where(Workspace, "id", workspace_id)
        batch.delete_where(Project, "workspace_id", workspace_id)
        for model in PROJECT_DEPENDENTS:
            batch.delete_in(model, "project_id", project_ids)
            # records may carry the workspace id under a project that is already gone
            if hasattr(model, "workspace_id"):
                batch.delete_where(model, "workspace_id", workspace_id)
        return batch

    async def delete_project(self, project_id: str) -> int:
        """Delete a project and everything whose project index matches"""
        return await self.commit_batch(self.plan_project_delete(project_id))

    async def delete_book(self, book_id: str) -> int:
        """Delete a book with its documents, groups, notes and plot structures"""
        return await self.commit_batch(self.plan_book_delete(book_id))

    async def delete_workspace(self, workspace_id: str) -> int:
        """Delete a workspace, its projects, and everything beneath them.

        Project discovery runs in the same transaction as the deletes.
        """

        async def operation(session: AsyncSession) -> int:
            project_ids = (
                await session.execute(
                    select(Project.id).where(Project.workspace_id == workspace_id)
                )
            ).scalars().all()
            batch = self.plan_workspace_delete(workspace_id, project_ids)
            return await batch.apply(session)

        removed = await self.run(f"delete workspace {workspace_id}", operation, write=True)
        logger.info("delete workspace %s removed %d records", workspace_id, removed)
        return removed

    async def delete_plot_structure(self, project_id: str) -> int:
        """Delete the project's plot structures, leaving the rest of the project"""
        return await self.plot_structures.delete_all(project_id, "project_id")

    # ============ Export ============

    async def export_project(self, project_id: str) -> ProjectBundle:
        """Project plus every dependent collection, read in one transaction"""

        async def operation(session: AsyncSession) -> ProjectBundle:
            bundle = {"project": await self.projects.fetch(session, project_id)}
            for name, store in self.stores.items():
                if name in ("workspaces", "projects"):
                    continue
                bundle[name] = await store.fetch_all(session, project_id, "project_id")
            return ProjectBundle(schema_version=self.database.schema_version, **bundle)

        return await self.run(f"export project {project_id}", operation)

    # ============ Settings ============

    async def get_settings(self) -> Optional[AppSettings]:
        """Saved settings, or None if they were never saved"""

        async def operation(session: AsyncSession) -> Optional[AppSettings]:
            row = await session.get(AppSettingsRow, SETTINGS_KEY)
            if row is None:
                return None
            return AppSettings.model_validate(row)

        return await self.run("get settings", operation)

    async def save_settings(self, settings: AppSettings) -> AppSettings:
        async def operation(session: AsyncSession) -> AppSettings:
            await session.merge(AppSettingsRow(key=SETTINGS_KEY, **settings.model_dump()))
            return settings

        return await self.run("save settings", operation, write=True)
