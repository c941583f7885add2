# -*- coding: utf-8 -*-
# @file deps.py
# @brief Request-scoped dependencies shared by the routers

from fastapi import Depends, Request

from scriptorium.service.storage_service import StorageGateway
from scriptorium.service.story_service import StoryService


def get_gateway(request: Request) -> StorageGateway:
    return request.app.state.gateway


def get_story_service(gateway: StorageGateway = Depends(get_gateway)) -> StoryService:
    return StoryService(gateway)
