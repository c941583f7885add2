# -*- coding: utf-8 -*-
# @file plot_templates.py
# @brief Beat-sheet templates for new plot structures
# @author sailing-innocent
# @date 2026-10-19

import logging
import math
from typing import Dict, List, Optional, Tuple

from scriptorium.data.schemas import BeatRecord, PlotStructureRecord

logger = logging.getLogger(__name__)

DEFAULT_TARGET_WORD_COUNT = 80000

# (name, percentage of the manuscript, description)
BeatTemplate = Tuple[str, float, str]

SAVE_THE_CAT_BEATS: Tuple[BeatTemplate, ...] = (
    ("Opening Image", 0, 'A snapshot of your hero\'s "before" world'),
    ("Theme Stated", 5, "A statement that hints at what your story is about"),
    ("Setup", 10, "Introduce your hero and their ordinary world"),
    ("Catalyst", 10, "Life-changing event that starts the adventure"),
    ("Debate", 20, "Should the hero accept the challenge?"),
    ("Break into Two", 20, "Hero commits to the adventure"),
    ("B Story", 22, "Introduction of love interest or helper"),
    ("Fun and Games", 30, "The promise of the premise delivered"),
    ("Midpoint", 50, "False victory or false defeat"),
    ("Bad Guys Close In", 60, "Forces of opposition regroup"),
    ("All Is Lost", 75, "Hero's lowest point"),
    ("Dark Night of the Soul", 80, "Hero wallows in hopelessness"),
    ("Break into Three", 80, "Hero finds the solution"),
    ("Finale", 85, "Climax and resolution"),
    ("Final Image", 100, 'Snapshot of the hero\'s "after" world'),
)

GENRE_TEMPLATES: Dict[str, Tuple[BeatTemplate, ...]] = {
    "romance": (
        ("Meet Cute", 10, "First meeting between love interests"),
        ("Conflict Introduced", 25, "What keeps them apart"),
        ("First Kiss", 50, "Romantic midpoint"),
        ("Black Moment", 75, "Relationship seems doomed"),
        ("Grand Gesture", 90, "One proves their love"),
        ("Happily Ever After", 100, "Couple united"),
    ),
    "mystery": (
        ("Crime Committed", 5, "The inciting incident"),
        ("Detective on Case", 15, "Protagonist takes the case"),
        ("First Clue", 25, "Investigation begins"),
        ("Red Herring", 50, "False lead at midpoint"),
        ("Truth Revealed", 85, "Real culprit exposed"),
        ("Justice Served", 100, "Resolution and consequences"),
    ),
    "thriller": (
        ("Ordinary World", 0, "Hero's normal life"),
        ("Inciting Incident", 10, "Threat introduced"),
        ("First Attack", 25, "Hero targeted"),
        ("Point of No Return", 50, "Stakes escalate dramatically"),
        ("Final Confrontation", 85, "Hero vs. antagonist"),
        ("New Normal", 100, "Aftermath and resolution"),
    ),
}


def beat_word_count(target_word_count: int, percentage: float) -> int:
    """Words written by the time the beat lands, halves rounded up"""
    return int(math.floor(target_word_count * percentage / 100 + 0.5))


def _beats(
    templates, project_id: str, id_prefix: str, target_word_count: int
) -> List[BeatRecord]:
    return [
        BeatRecord(
            id=f"{id_prefix}-{index}",
            project_id=project_id,
            name=name,
            percentage=percentage,
            description=description,
            content="",
            word_count=beat_word_count(target_word_count, percentage),
        )
        for index, (name, percentage, description) in enumerate(templates)
    ]


def default_beat_sheet(
    workspace_id: str,
    project_id: str,
    book_id: str,
    target_word_count: int = DEFAULT_TARGET_WORD_COUNT,
) -> PlotStructureRecord:
    """A fresh plot structure laid out on the fifteen Save the Cat beats.

    Beat ids are ``beat-<project>-<index>`` and the structure id is
    ``plot-<project>``, so regenerating the sheet overwrites the previous one.
    """
    return PlotStructureRecord(
        id=f"plot-{project_id}",
        workspace_id=workspace_id,
        project_id=project_id,
        book_id=book_id,
        target_word_count=target_word_count,
        beats=_beats(SAVE_THE_CAT_BEATS, project_id, f"beat-{project_id}", target_word_count),
    )


def genre_beat_sheet(
    genre: Optional[str],
    workspace_id: str,
    project_id: str,
    book_id: str,
    target_word_count: int = DEFAULT_TARGET_WORD_COUNT,
) -> PlotStructureRecord:
    """Plot structure for a genre template; unknown genres get the default sheet"""
    templates = GENRE_TEMPLATES.get(genre) if genre else None
    if templates is None:
        logger.debug("No beat template for genre %r, using the default sheet", genre)
        return default_beat_sheet(workspace_id, project_id, book_id, target_word_count)

    return PlotStructureRecord(
        id=f"plot-{project_id}-{genre}",
        workspace_id=workspace_id,
        project_id=project_id,
        book_id=book_id,
        target_word_count=target_word_count,
        beats=_beats(templates, project_id, f"beat-{project_id}-{genre}", target_word_count),
    )
