import asyncio
import sqlite3

import pytest

import scriptorium.db as db_module
from scriptorium.config import StorageConfig
from scriptorium.data.errors import StorageUnavailableError
from scriptorium.data.orm import SCHEMA_VERSION
from scriptorium.data.schemas import DocumentRecord, WorkspaceRecord
from scriptorium.db import Database
from scriptorium.service.storage_service import StorageGateway


def _db_file(config) -> str:
    return config.db_uri.split("///", 1)[1]


def _index_names(path: str, table: str):
    with sqlite3.connect(path) as conn:
        return {row[1] for row in conn.execute(f"PRAGMA index_list('{table}')")}


def _stored_version(path: str) -> int:
    with sqlite3.connect(path) as conn:
        return conn.execute(
            "SELECT value FROM schema_meta WHERE key = 'schema_version'"
        ).fetchone()[0]


def test_first_open_creates_collections_and_version(run_with_gateway, config):
    async def scenario(gateway):
        assert gateway.state == "uninitialized"
        await gateway.workspaces.get_all()
        return gateway.state

    assert run_with_gateway(scenario) == "ready"
    path = _db_file(config)
    assert _stored_version(path) == SCHEMA_VERSION
    assert {
        "ix_documents_project_id",
        "ix_documents_book_id",
        "ix_documents_workspace_id",
        "ix_documents_group_id",
    } <= _index_names(path, "documents")


def test_reopen_keeps_data(run_with_gateway):
    workspace = WorkspaceRecord(id="w1", name="Home")

    async def first(gateway):
        await gateway.workspaces.save(workspace)

    async def second(gateway):
        return await gateway.workspaces.get("w1")

    run_with_gateway(first)
    assert run_with_gateway(second) == workspace


def test_higher_declared_version_upgrades_in_place(run_with_gateway, config):
    async def first(gateway):
        await gateway.workspaces.save(WorkspaceRecord(id="w1", name="Home"))

    async def second(gateway):
        return await gateway.workspaces.get_all()

    run_with_gateway(first)
    newer = lambda: StorageGateway(config, Database(config, schema_version=SCHEMA_VERSION + 1))
    workspaces = run_with_gateway(second, gateway_factory=newer)
    assert [w.id for w in workspaces] == ["w1"]
    assert _stored_version(_db_file(config)) == SCHEMA_VERSION + 1


def test_store_from_newer_release_is_refused(run_with_gateway, config):
    newer = lambda: StorageGateway(config, Database(config, schema_version=SCHEMA_VERSION + 1))

    async def touch(gateway):
        await gateway.workspaces.get_all()

    async def reopen(gateway):
        with pytest.raises(StorageUnavailableError) as first:
            await gateway.workspaces.get_all()
        with pytest.raises(StorageUnavailableError) as second:
            await gateway.workspaces.save(WorkspaceRecord(name="late"))
        return gateway.state, first.value, second.value

    run_with_gateway(touch, gateway_factory=newer)
    state, first, second = run_with_gateway(reopen)
    assert state == "unavailable"
    # the failed open is remembered, not retried
    assert first is second


def test_missing_index_is_recreated(run_with_gateway, config):
    document = DocumentRecord(workspace_id="w1", project_id="p1", book_id="b1", title="One")

    async def first(gateway):
        await gateway.documents.save(document)

    run_with_gateway(first)
    path = _db_file(config)
    with sqlite3.connect(path) as conn:
        conn.execute("DROP INDEX ix_documents_book_id")
        conn.execute("UPDATE schema_meta SET value = ? WHERE key = 'schema_version'", (4,))
    assert "ix_documents_book_id" not in _index_names(path, "documents")

    async def second(gateway):
        return await gateway.documents.get_all("b1", "book_id")

    assert run_with_gateway(second) == [document]
    assert "ix_documents_book_id" in _index_names(path, "documents")
    assert _stored_version(path) == SCHEMA_VERSION


def test_concurrent_first_calls_open_once(run_with_gateway, monkeypatch):
    created = []
    real_create = db_module.create_async_engine

    def counting_create(*args, **kwargs):
        created.append(args[0])
        return real_create(*args, **kwargs)

    monkeypatch.setattr(db_module, "create_async_engine", counting_create)

    async def scenario(gateway):
        return await asyncio.gather(
            gateway.workspaces.get_all(),
            gateway.documents.get_all("p1"),
            gateway.characters.get_all("p1"),
            gateway.get_settings(),
        )

    results = run_with_gateway(scenario)
    assert results == [[], [], [], None]
    assert len(created) == 1


def test_unopenable_path_reports_unavailable(tmp_path, run_with_gateway):
    # a directory where the database file should be
    blocked = tmp_path / "blocked.sqlite"
    blocked.mkdir()
    config = StorageConfig(db_uri=f"sqlite+aiosqlite:///{blocked.as_posix()}")

    async def scenario(gateway):
        with pytest.raises(StorageUnavailableError) as excinfo:
            await gateway.workspaces.get_all()
        return gateway.state, excinfo.value

    state, error = run_with_gateway(scenario, gateway_factory=lambda: StorageGateway(config))
    assert state == "unavailable"
    assert error.cause is not None
