# -*- coding: utf-8 -*-
# @file settings.py
# @brief API routes for application settings
# @author sailing-innocent
# @date 2026-10-19

from fastapi import APIRouter, Depends

from scriptorium.router.deps import get_gateway
from scriptorium.service.storage_service import StorageGateway
from scriptorium.data.schemas import AppSettings

router = APIRouter(prefix="/api/v1", tags=["settings"])


@router.get("/settings", response_model=AppSettings)
async def get_settings(gateway: StorageGateway = Depends(get_gateway)):
    """Saved settings, or the defaults when none were saved"""
    settings = await gateway.get_settings()
    return settings or AppSettings()


@router.put("/settings", response_model=AppSettings)
async def save_settings(settings: AppSettings, gateway: StorageGateway = Depends(get_gateway)):
    return await gateway.save_settings(settings)
