# -*- coding: utf-8 -*-
# @file hierarchy.py
# @brief API routes for workspaces, projects and books
# @author sailing-innocent
# @date 2026-10-19

from fastapi import APIRouter, Depends, HTTPException, status
from typing import List

from scriptorium.router.deps import get_gateway
from scriptorium.service.storage_service import StorageGateway
from scriptorium.data.schemas import (
    WorkspaceRecord,
    ProjectRecord,
    BookRecord,
    ProjectBundle,
)

router = APIRouter(prefix="/api/v1", tags=["hierarchy"])


def _check_id(path_id: str, record_id: str) -> None:
    if path_id != record_id:
        raise HTTPException(
            status_code=400, detail=f"Body id {record_id} does not match path id {path_id}"
        )


# ============ Workspace Endpoints ============


@router.get("/workspaces", response_model=List[WorkspaceRecord])
async def list_workspaces(gateway: StorageGateway = Depends(get_gateway)):
    """List all workspaces"""
    return await gateway.workspaces.get_all()


@router.get("/workspaces/{workspace_id}", response_model=WorkspaceRecord)
async def get_workspace(workspace_id: str, gateway: StorageGateway = Depends(get_gateway)):
    workspace = await gateway.workspaces.get(workspace_id)
    if not workspace:
        raise HTTPException(status_code=404, detail="Workspace not found")
    return workspace


@router.put("/workspaces/{workspace_id}", response_model=WorkspaceRecord)
async def save_workspace(
    workspace_id: str,
    workspace: WorkspaceRecord,
    gateway: StorageGateway = Depends(get_gateway),
):
    """Create or replace a workspace"""
    _check_id(workspace_id, workspace.id)
    return await gateway.workspaces.save(workspace)


@router.delete("/workspaces/{workspace_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_workspace(workspace_id: str, gateway: StorageGateway = Depends(get_gateway)):
    """Delete a workspace with all of its projects and their content"""
    await gateway.delete_workspace(workspace_id)


# ============ Project Endpoints ============


@router.get("/workspaces/{workspace_id}/projects", response_model=List[ProjectRecord])
async def list_projects(workspace_id: str, gateway: StorageGateway = Depends(get_gateway)):
    return await gateway.projects.get_all(workspace_id)


@router.get("/projects/{project_id}", response_model=ProjectRecord)
async def get_project(project_id: str, gateway: StorageGateway = Depends(get_gateway)):
    project = await gateway.projects.get(project_id)
    if not project:
        raise HTTPException(status_code=404, detail="Project not found")
    return project


@router.put("/projects/{project_id}", response_model=ProjectRecord)
async def save_project(
    project_id: str,
    project: ProjectRecord,
    gateway: StorageGateway = Depends(get_gateway),
):
    _check_id(project_id, project.id)
    return await gateway.projects.save(project)


@router.delete("/projects/{project_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_project(project_id: str, gateway: StorageGateway = Depends(get_gateway)):
    """Delete a project and every record filed under it"""
    await gateway.delete_project(project_id)


@router.get("/projects/{project_id}/export", response_model=ProjectBundle)
async def export_project(project_id: str, gateway: StorageGateway = Depends(get_gateway)):
    """Snapshot of a project and all of its collections"""
    bundle = await gateway.export_project(project_id)
    if bundle.project is None:
        raise HTTPException(status_code=404, detail="Project not found")
    return bundle


# ============ Book Endpoints ============


@router.get("/projects/{project_id}/books", response_model=List[BookRecord])
async def list_books(project_id: str, gateway: StorageGateway = Depends(get_gateway)):
    return await gateway.books.get_all(project_id, "project_id")


@router.get("/books/{book_id}", response_model=BookRecord)
async def get_book(book_id: str, gateway: StorageGateway = Depends(get_gateway)):
    book = await gateway.books.get(book_id)
    if not book:
        raise HTTPException(status_code=404, detail="Book not found")
    return book


@router.put("/books/{book_id}", response_model=BookRecord)
async def save_book(
    book_id: str,
    book: BookRecord,
    gateway: StorageGateway = Depends(get_gateway),
):
    _check_id(book_id, book.id)
    return await gateway.books.save(book)


@router.delete("/books/{book_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_book(book_id: str, gateway: StorageGateway = Depends(get_gateway)):
    """Delete a book with its documents, groups, notes and plot structures"""
    await gateway.delete_book(book_id)
