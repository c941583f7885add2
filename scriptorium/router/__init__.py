# -*- coding: utf-8 -*-
# @file __init__.py
# @brief API router package
# @author sailing-innocent
# @date 2026-10-19

from scriptorium.router.hierarchy import router as hierarchy_router
from scriptorium.router.collections import router as collections_router
from scriptorium.router.settings import router as settings_router

__all__ = [
    "hierarchy_router",
    "collections_router",
    "settings_router",
]
