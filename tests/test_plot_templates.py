from scriptorium.data.schemas import PlotStructureRecord, ProjectRecord, WorkspaceRecord
from scriptorium.service.plot_templates import (
    SAVE_THE_CAT_BEATS,
    beat_word_count,
    default_beat_sheet,
    genre_beat_sheet,
)


def test_default_sheet_lays_out_save_the_cat_beats():
    plot = default_beat_sheet("w1", "p1", "b1")

    assert plot.id == "plot-p1"
    assert plot.target_word_count == 80000
    assert len(plot.beats) == 15
    assert [b.name for b in plot.beats] == [name for name, _, _ in SAVE_THE_CAT_BEATS]
    assert plot.beats[0].name == "Opening Image"
    assert plot.beats[-1].name == "Final Image"
    assert [b.id for b in plot.beats[:2]] == ["beat-p1-0", "beat-p1-1"]
    assert all(b.project_id == "p1" and b.content == "" for b in plot.beats)

    words = {b.name: b.word_count for b in plot.beats}
    assert words["Opening Image"] == 0
    assert words["Theme Stated"] == 4000
    assert words["B Story"] == 17600
    assert words["Midpoint"] == 40000
    assert words["Final Image"] == 80000


def test_word_counts_round_half_up():
    assert beat_word_count(50, 5) == 3
    assert beat_word_count(30, 5) == 2
    assert beat_word_count(1001, 50) == 501
    assert beat_word_count(0, 75) == 0


def test_genre_sheet_uses_its_own_beats_and_ids():
    plot = genre_beat_sheet("mystery", "w1", "p1", "b1", target_word_count=60000)

    assert plot.id == "plot-p1-mystery"
    assert [b.name for b in plot.beats] == [
        "Crime Committed",
        "Detective on Case",
        "First Clue",
        "Red Herring",
        "Truth Revealed",
        "Justice Served",
    ]
    assert plot.beats[0].id == "beat-p1-mystery-0"
    assert plot.beats[3].word_count == 30000
    assert plot.book_id == "b1"


def test_unknown_genre_falls_back_to_default_sheet():
    for genre in ("western", None, ""):
        plot = genre_beat_sheet(genre, "w1", "p1", "b1")
        assert plot.id == "plot-p1"
        assert len(plot.beats) == 15


def test_template_sheet_round_trips_through_the_store(run_with_gateway):
    async def scenario(gateway):
        await gateway.plot_structures.save(genre_beat_sheet("romance", "w1", "p1", "b1"))
        return await gateway.plot_structures.get_first("p1", "project_id")

    plot = run_with_gateway(scenario)
    assert isinstance(plot, PlotStructureRecord)
    assert plot.id == "plot-p1-romance"
    assert [b.percentage for b in plot.beats] == [10, 25, 50, 75, 90, 100]
    assert plot.beats[-1].word_count == 80000


def test_delete_plot_structure_only_touches_that_project(run_with_gateway):
    async def scenario(gateway):
        await gateway.workspaces.save(WorkspaceRecord(id="w1", name="w1"))
        await gateway.projects.save(ProjectRecord(id="p1", workspace_id="w1", name="p1"))
        await gateway.plot_structures.save(default_beat_sheet("w1", "p1", "b1"))
        await gateway.plot_structures.save(genre_beat_sheet("thriller", "w1", "p1", "b2"))
        await gateway.plot_structures.save(default_beat_sheet("w1", "p2", "b3"))

        removed = await gateway.delete_plot_structure("p1")
        again = await gateway.delete_plot_structure("p1")
        return (
            removed,
            again,
            await gateway.plot_structures.get_all("p1", "project_id"),
            await gateway.plot_structures.get_all("p2", "project_id"),
            await gateway.projects.get("p1"),
        )

    removed, again, gone, kept, project = run_with_gateway(scenario)
    assert removed == 2
    assert again == 0
    assert gone == []
    assert [p.id for p in kept] == ["plot-p2"]
    assert project is not None
