# -*- coding: utf-8 -*-
# @file state.py
# @brief In-memory editor state and the pure reducer that advances it
# @author sailing-innocent
# @date 2026-10-19

from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Literal, Optional

from scriptorium.data.schemas import (
    AppSettings,
    BookRecord,
    CharacterRecord,
    DocumentRecord,
    GroupRecord,
    LocationRecord,
    NoteRecord,
    PlotStructureRecord,
    ProjectRecord,
    RelationshipRecord,
    WorkspaceRecord,
    WorldEventRecord,
    WorldRuleRecord,
)

View = Literal["write", "characters", "world", "notes", "plot", "settings"]

# Collections whose selected record is tracked on the state
CURRENT_FIELDS = {
    "workspaces": "current_workspace",
    "projects": "current_project",
    "books": "current_book",
    "documents": "current_document",
}

PLOT_COLLECTIONS = ("beats", "themes", "conflicts", "b_stories")


@dataclass(frozen=True)
class AppState:
    """What the editor currently has loaded and selected"""

    current_workspace: Optional[WorkspaceRecord] = None
    workspaces: List[WorkspaceRecord] = field(default_factory=list)
    current_project: Optional[ProjectRecord] = None
    projects: List[ProjectRecord] = field(default_factory=list)
    current_book: Optional[BookRecord] = None
    books: List[BookRecord] = field(default_factory=list)

    documents: List[DocumentRecord] = field(default_factory=list)
    groups: List[GroupRecord] = field(default_factory=list)
    characters: List[CharacterRecord] = field(default_factory=list)
    relationships: List[RelationshipRecord] = field(default_factory=list)
    locations: List[LocationRecord] = field(default_factory=list)
    world_events: List[WorldEventRecord] = field(default_factory=list)
    world_rules: List[WorldRuleRecord] = field(default_factory=list)
    notes: List[NoteRecord] = field(default_factory=list)
    plot_structure: Optional[PlotStructureRecord] = None

    current_document: Optional[DocumentRecord] = None
    current_view: View = "write"
    theme: Literal["light", "dark"] = "dark"
    credits: int = 0
    free_queries_left: int = 5
    settings: AppSettings = field(default_factory=AppSettings)


@dataclass(frozen=True)
class Action:
    """One state change.

    ``collection`` names the list an add/update/delete/set/select acts on,
    or the plot-structure list for the ``*_plot_item`` actions.
    """

    type: str
    payload: Any = None
    collection: Optional[str] = None


def _replace_by_id(records: list, record) -> list:
    return [record if r.id == record.id else r for r in records]


def _without_id(records: list, record_id: str) -> list:
    return [r for r in records if r.id != record_id]


def _collection(state: AppState, name: Optional[str]) -> list:
    if name is None or not isinstance(getattr(state, name, None), list):
        raise ValueError(f"Unknown collection: {name!r}")
    return getattr(state, name)


def _set(state: AppState, action: Action) -> AppState:
    _collection(state, action.collection)
    return replace(state, **{action.collection: list(action.payload)})


def _add(state: AppState, action: Action) -> AppState:
    records = _collection(state, action.collection)
    return replace(state, **{action.collection: records + [action.payload]})


def _update(state: AppState, action: Action) -> AppState:
    name = action.collection
    record = action.payload
    changes: Dict[str, Any] = {name: _replace_by_id(_collection(state, name), record)}
    current_field = CURRENT_FIELDS.get(name)
    if current_field:
        current = getattr(state, current_field)
        if current is not None and current.id == record.id:
            changes[current_field] = record
    return replace(state, **changes)


def _delete(state: AppState, action: Action) -> AppState:
    name = action.collection
    record_id = action.payload
    changes: Dict[str, Any] = {name: _without_id(_collection(state, name), record_id)}

    current_field = CURRENT_FIELDS.get(name)
    if current_field:
        current = getattr(state, current_field)
        if current is not None and current.id == record_id:
            changes[current_field] = None

    if name == "characters":
        changes["relationships"] = [
            r for r in state.relationships if record_id not in (r.from_id, r.to_id)
        ]
    elif name == "locations":
        changes["world_events"] = [
            e.model_copy(update={"location_ids": [i for i in e.location_ids if i != record_id]})
            if record_id in e.location_ids
            else e
            for e in state.world_events
        ]
    elif name == "groups":
        changes["documents"] = [
            d.model_copy(update={"group_id": None}) if d.group_id == record_id else d
            for d in state.documents
        ]
    return replace(state, **changes)


def _select(state: AppState, action: Action) -> AppState:
    current_field = CURRENT_FIELDS.get(action.collection)
    if current_field is None:
        raise ValueError(f"Collection {action.collection!r} has no current selection")
    return replace(state, **{current_field: action.payload})


def _toggle_group_expansion(state: AppState, action: Action) -> AppState:
    return replace(
        state,
        groups=[
            g.model_copy(update={"is_expanded": not g.is_expanded}) if g.id == action.payload else g
            for g in state.groups
        ],
    )


def _set_plot_structure(state: AppState, action: Action) -> AppState:
    return replace(state, plot_structure=action.payload)


def _update_plot_structure(state: AppState, action: Action) -> AppState:
    if state.plot_structure is None:
        return state
    return replace(state, plot_structure=state.plot_structure.model_copy(update=action.payload))


def _plot_item(state: AppState, action: Action, edit) -> AppState:
    if action.collection not in PLOT_COLLECTIONS:
        raise ValueError(f"Unknown plot collection: {action.collection!r}")
    if state.plot_structure is None:
        return state
    items = getattr(state.plot_structure, action.collection)
    plot = state.plot_structure.model_copy(update={action.collection: edit(items, action.payload)})
    return replace(state, plot_structure=plot)


def _update_settings(state: AppState, action: Action) -> AppState:
    merged = {**state.settings.model_dump(), **action.payload}
    return replace(state, settings=AppSettings.model_validate(merged))


_HANDLERS = {
    "set": _set,
    "add": _add,
    "update": _update,
    "delete": _delete,
    "select": _select,
    "toggle_group_expansion": _toggle_group_expansion,
    "set_plot_structure": _set_plot_structure,
    "update_plot_structure": _update_plot_structure,
    "add_plot_item": lambda s, a: _plot_item(s, a, lambda items, item: items + [item]),
    "update_plot_item": lambda s, a: _plot_item(s, a, _replace_by_id),
    "delete_plot_item": lambda s, a: _plot_item(s, a, _without_id),
    "set_view": lambda s, a: replace(s, current_view=a.payload),
    "set_theme": lambda s, a: replace(s, theme=a.payload),
    "set_credits": lambda s, a: replace(s, credits=a.payload),
    "set_free_queries": lambda s, a: replace(s, free_queries_left=a.payload),
    "update_settings": _update_settings,
}


def reduce(state: AppState, action: Action) -> AppState:
    """Return the state after action; state itself is never modified.

    Unknown action types leave the state as it is.
    """
    handler = _HANDLERS.get(action.type)
    if handler is None:
        return state
    return handler(state, action)
