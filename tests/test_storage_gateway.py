import asyncio
from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from scriptorium.config import StorageConfig
from scriptorium.data.errors import StorageError, StorageTimeoutError
from scriptorium.data.schemas import (
    AppSettings,
    BookRecord,
    CharacterRecord,
    DocumentNote,
    DocumentRecord,
    PlotStructureRecord,
    BeatRecord,
    ProjectRecord,
    WorkspaceRecord,
)
from scriptorium.service.storage_service import StorageGateway
from scriptorium.utils.ids import utc_now


def _document(**overrides) -> DocumentRecord:
    data = {
        "workspace_id": "w1",
        "project_id": "p1",
        "book_id": "b1",
        "title": "Chapter One",
        "content": "It was a dark and stormy night.",
        "notes": [DocumentNote(content="tighten the opening")],
        "tags": ["draft", "act-1"],
        "deadline": datetime(2026, 11, 1, 9, 30, tzinfo=timezone.utc),
    }
    data.update(overrides)
    return DocumentRecord(**data)


def test_saved_record_comes_back_equal(run_with_gateway):
    document = _document()

    async def scenario(gateway):
        await gateway.documents.save(document)
        listed = await gateway.documents.get_all("p1")
        fetched = await gateway.documents.get(document.id)
        return listed, fetched

    listed, fetched = run_with_gateway(scenario)
    assert listed == [document]
    assert fetched == document
    # timezone-aware input is stored as naive UTC
    assert fetched.deadline == datetime(2026, 11, 1, 9, 30)


def test_every_scope_index_finds_the_record(run_with_gateway):
    document = _document(group_id="g1")

    async def scenario(gateway):
        await gateway.documents.save(document)
        return {
            by: await gateway.documents.get_all(scope_id, by)
            for by, scope_id in (
                ("project_id", "p1"),
                ("book_id", "b1"),
                ("workspace_id", "w1"),
                ("group_id", "g1"),
            )
        }

    found = run_with_gateway(scenario)
    for by, records in found.items():
        assert [r.id for r in records] == [document.id], by


def test_save_twice_keeps_one_record(run_with_gateway):
    document = _document()

    async def scenario(gateway):
        await gateway.documents.save(document)
        await gateway.documents.save(document)
        edited = document.model_copy(update={"content": "Rewritten."})
        await gateway.documents.save(edited)
        return await gateway.documents.get_all("b1", "book_id")

    records = run_with_gateway(scenario)
    assert len(records) == 1
    assert records[0].content == "Rewritten."


def test_orphaned_document_is_kept(run_with_gateway):
    book = BookRecord(id="b1", project_id="p1", workspace_id="w1", title="Book")

    async def scenario(gateway):
        await gateway.books.save(book)
        await gateway.delete_book("b1")
        # the book is gone; saving a document under it is still accepted
        await gateway.documents.save(_document())
        return await gateway.documents.get_all("b1", "book_id")

    records = run_with_gateway(scenario)
    assert len(records) == 1


def test_deleting_missing_record_is_not_an_error(run_with_gateway):
    async def scenario(gateway):
        await gateway.characters.delete("no-such-character")
        return await gateway.characters.get("no-such-character")

    assert run_with_gateway(scenario) is None


def test_empty_scope_returns_empty_list(run_with_gateway):
    async def scenario(gateway):
        return await gateway.locations.get_all("nobody", "book_id")

    assert run_with_gateway(scenario) == []


def test_scoped_collections_require_an_owner(run_with_gateway):
    async def scenario(gateway):
        with pytest.raises(ValueError):
            await gateway.documents.get_all()
        with pytest.raises(ValueError):
            await gateway.beats.get_all("p1", "book_id")

    run_with_gateway(scenario)


def test_workspaces_and_projects_list_without_scope(run_with_gateway):
    async def scenario(gateway):
        await gateway.workspaces.save(WorkspaceRecord(id="w1", name="Home"))
        await gateway.workspaces.save(WorkspaceRecord(id="w2", name="Away"))
        await gateway.projects.save(ProjectRecord(id="p1", workspace_id="w1", name="Saga"))
        return (
            await gateway.workspaces.get_all(),
            await gateway.projects.get_all(),
            await gateway.projects.get_all("w2"),
        )

    workspaces, projects, empty = run_with_gateway(scenario)
    assert sorted(w.id for w in workspaces) == ["w1", "w2"]
    assert [p.id for p in projects] == ["p1"]
    assert empty == []


def test_get_first_returns_the_plot_structure(run_with_gateway):
    plot = PlotStructureRecord(
        workspace_id="w1",
        project_id="p1",
        book_id="b1",
        target_word_count=90000,
        beats=[BeatRecord(project_id="p1", name="Opening Image", percentage=1)],
    )

    async def scenario(gateway):
        missing = await gateway.plot_structures.get_first("p1")
        await gateway.plot_structures.save(plot)
        return missing, await gateway.plot_structures.get_first("p1")

    missing, found = run_with_gateway(scenario)
    assert missing is None
    assert found == plot
    assert found.beats[0].name == "Opening Image"


def test_open_maps_only_take_scalars():
    character = CharacterRecord(
        workspace_id="w1",
        project_id="p1",
        book_id="b1",
        name="Ada",
        traits={"age": 31, "brave": True, "height": 1.7, "motto": "1"},
    )
    assert character.traits["motto"] == "1"
    with pytest.raises(ValidationError):
        CharacterRecord(
            workspace_id="w1",
            project_id="p1",
            book_id="b1",
            name="Ada",
            traits={"friends": ["Bob"]},
        )


def test_save_accepts_plain_dicts(run_with_gateway):
    async def scenario(gateway):
        saved = await gateway.workspaces.save({"id": "w9", "name": "Dict"})
        return saved, await gateway.workspaces.get("w9")

    saved, fetched = run_with_gateway(scenario)
    assert isinstance(saved, WorkspaceRecord)
    assert fetched.name == "Dict"


def test_settings_start_empty_then_persist(run_with_gateway):
    async def scenario(gateway):
        before = await gateway.get_settings()
        await gateway.save_settings(AppSettings(font_size=18, theme="light"))
        await gateway.save_settings(AppSettings(font_size=20, theme="light"))
        return before, await gateway.get_settings()

    before, after = run_with_gateway(scenario)
    assert before is None
    assert after.font_size == 20
    assert after.theme == "light"
    assert after.free_queries_left == 5


def test_slow_operation_times_out(tmp_path, monkeypatch):
    config = StorageConfig.for_path(tmp_path / "slow.sqlite", op_timeout=0.05)
    gateway = StorageGateway(config)

    async def hang(operation, write):
        await asyncio.sleep(5)

    monkeypatch.setattr(gateway, "_execute", hang)

    async def scenario():
        try:
            with pytest.raises(StorageTimeoutError) as excinfo:
                await gateway.documents.get_all("p1")
        finally:
            await gateway.close()
        return excinfo.value

    error = asyncio.run(scenario())
    assert isinstance(error, StorageError)
    assert isinstance(error.cause, asyncio.TimeoutError)


def test_concurrent_writes_to_different_records(run_with_gateway):
    documents = [_document(title=f"Scene {i}") for i in range(10)]

    async def scenario(gateway):
        await asyncio.gather(*(gateway.documents.save(d) for d in documents))
        return await gateway.documents.get_all("p1")

    records = run_with_gateway(scenario)
    assert sorted(r.id for r in records) == sorted(d.id for d in documents)


def test_updated_timestamps_survive_round_trip(run_with_gateway):
    workspace = WorkspaceRecord(
        id="w1", name="Home", updated_at=utc_now() + timedelta(days=1)
    )

    async def scenario(gateway):
        await gateway.workspaces.save(workspace)
        return await gateway.workspaces.get("w1")

    assert run_with_gateway(scenario).updated_at == workspace.updated_at
