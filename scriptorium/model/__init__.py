# -*- coding: utf-8 -*-
# @file __init__.py
# @brief ORM models package
# @author sailing-innocent
# @date 2026-10-19

from scriptorium.model.workspace import Workspace, Project, Book
from scriptorium.model.document import Document, Group
from scriptorium.model.character import Character, Relationship
from scriptorium.model.world import Location, WorldEvent, WorldRule
from scriptorium.model.note import Note
from scriptorium.model.plot import PlotStructure, Beat, Theme, Conflict, BStory
from scriptorium.model.settings import AppSettingsRow, SchemaMeta

__all__ = [
    "Workspace",
    "Project",
    "Book",
    "Document",
    "Group",
    "Character",
    "Relationship",
    "Location",
    "WorldEvent",
    "WorldRule",
    "Note",
    "PlotStructure",
    "Beat",
    "Theme",
    "Conflict",
    "BStory",
    "AppSettingsRow",
    "SchemaMeta",
]
