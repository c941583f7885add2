# -*- coding: utf-8 -*-
# @file __init__.py
# @brief Service layer package
# @author sailing-innocent
# @date 2026-10-19

from scriptorium.service.cascade import CascadeBatch
from scriptorium.service.storage_service import RecordStore, StorageGateway
from scriptorium.service.story_service import StoryService
from scriptorium.service.autosave import AutoSaver
from scriptorium.service.plot_templates import default_beat_sheet, genre_beat_sheet

__all__ = [
    "CascadeBatch",
    "RecordStore",
    "StorageGateway",
    "StoryService",
    "AutoSaver",
    "default_beat_sheet",
    "genre_beat_sheet",
]
