# -*- coding: utf-8 -*-
# @file collections.py
# @brief API routes for the project-scoped content collections
# @author sailing-innocent
# @date 2026-10-19

from fastapi import APIRouter, Depends, HTTPException, status
from typing import List, Optional, Type

from pydantic import BaseModel

from scriptorium.router.deps import get_gateway, get_story_service
from scriptorium.service.storage_service import StorageGateway
from scriptorium.service.story_service import StoryService
from scriptorium.data.schemas import (
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
    PlotTemplateRequest,
)
from scriptorium.service.plot_templates import genre_beat_sheet

router = APIRouter(prefix="/api/v1", tags=["collections"])

# gateway attribute -> record type
COLLECTIONS = {
    "documents": DocumentRecord,
    "groups": GroupRecord,
    "characters": CharacterRecord,
    "relationships": RelationshipRecord,
    "locations": LocationRecord,
    "world_events": WorldEventRecord,
    "world_rules": WorldRuleRecord,
    "notes": NoteRecord,
    "plot_structures": PlotStructureRecord,
    "beats": BeatRecord,
    "themes": ThemeRecord,
    "conflicts": ConflictRecord,
    "b_stories": BStoryRecord,
}


def collection_path(name: str) -> str:
    return name.replace("_", "-")


def build_collection_router(name: str, schema: Type[BaseModel]) -> APIRouter:
    """List, upsert and delete routes for one collection"""
    sub = APIRouter(tags=[name])
    path = collection_path(name)

    @sub.get(f"/projects/{{project_id}}/{path}", response_model=List[schema])
    async def list_for_project(project_id: str, gateway: StorageGateway = Depends(get_gateway)):
        return await getattr(gateway, name).get_all(project_id, "project_id")

    if "book_id" in schema.model_fields:

        @sub.get(f"/books/{{book_id}}/{path}", response_model=List[schema])
        async def list_for_book(book_id: str, gateway: StorageGateway = Depends(get_gateway)):
            return await getattr(gateway, name).get_all(book_id, "book_id")

    @sub.get(f"/{path}/{{record_id}}", response_model=schema)
    async def get_record(record_id: str, gateway: StorageGateway = Depends(get_gateway)):
        record = await getattr(gateway, name).get(record_id)
        if not record:
            raise HTTPException(status_code=404, detail=f"{name} record not found")
        return record

    if name == "relationships":

        @sub.put(f"/{path}/{{record_id}}", response_model=schema)
        async def save_relationship(
            record_id: str,
            record: schema,
            service: StoryService = Depends(get_story_service),
        ):
            """Create or replace a relationship; self-links and duplicate pairs are refused"""
            _check_id(record_id, record.id)
            return await service.add_relationship(record)

    else:

        @sub.put(f"/{path}/{{record_id}}", response_model=schema)
        async def save_record(
            record_id: str,
            record: schema,
            gateway: StorageGateway = Depends(get_gateway),
        ):
            _check_id(record_id, record.id)
            return await getattr(gateway, name).save(record)

    if name in ("characters", "locations"):

        @sub.delete(f"/{path}/{{record_id}}", status_code=status.HTTP_204_NO_CONTENT)
        async def delete_with_references(
            record_id: str,
            gateway: StorageGateway = Depends(get_gateway),
            service: StoryService = Depends(get_story_service),
        ):
            """Delete the record and the references other records hold to it"""
            record = await getattr(gateway, name).get(record_id)
            if record is None:
                return
            if name == "characters":
                await service.delete_character(record_id, record.project_id)
            else:
                await service.delete_location(record_id, record.project_id)

    else:

        @sub.delete(f"/{path}/{{record_id}}", status_code=status.HTTP_204_NO_CONTENT)
        async def delete_record(record_id: str, gateway: StorageGateway = Depends(get_gateway)):
            await getattr(gateway, name).delete(record_id)

    return sub


def _check_id(path_id: str, record_id: str) -> None:
    if path_id != record_id:
        raise HTTPException(
            status_code=400, detail=f"Body id {record_id} does not match path id {path_id}"
        )


for _name, _schema in COLLECTIONS.items():
    router.include_router(build_collection_router(_name, _schema))


# ============ Derived Views ============


@router.get("/projects/{project_id}/plot-structure", response_model=Optional[PlotStructureRecord])
async def get_plot_structure(project_id: str, gateway: StorageGateway = Depends(get_gateway)):
    """The project's plot structure, or null if none was saved yet"""
    return await gateway.plot_structures.get_first(project_id, "project_id")


@router.post("/projects/{project_id}/plot-structure/template", response_model=PlotStructureRecord)
async def create_plot_structure_from_template(
    project_id: str, request: PlotTemplateRequest, gateway: StorageGateway = Depends(get_gateway)
):
    """Lay out a beat sheet for the project from the genre template"""
    project = await gateway.projects.get(project_id)
    if not project:
        raise HTTPException(status_code=404, detail="Project not found")
    plot = genre_beat_sheet(
        request.genre,
        project.workspace_id,
        project_id,
        request.book_id,
        request.target_word_count,
    )
    return await gateway.plot_structures.save(plot)


@router.delete("/projects/{project_id}/plot-structure", status_code=status.HTTP_204_NO_CONTENT)
async def delete_plot_structure(project_id: str, gateway: StorageGateway = Depends(get_gateway)):
    await gateway.delete_plot_structure(project_id)


@router.get("/locations/{location_id}/connections", response_model=List[LocationRecord])
async def list_connected_locations(
    location_id: str, gateway: StorageGateway = Depends(get_gateway)
):
    """Locations linked to this one in either direction"""
    location = await gateway.locations.get(location_id)
    if not location:
        raise HTTPException(status_code=404, detail="Location not found")
    siblings = await gateway.locations.get_all(location.project_id, "project_id")
    return StoryService.connected_locations(location, siblings)
