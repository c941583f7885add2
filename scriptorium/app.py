# -*- coding: utf-8 -*-
# @file app.py
# @brief FastAPI application factory
# @author sailing-innocent
# @date 2026-10-19

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from scriptorium.config import StorageConfig
from scriptorium.data.errors import (
    RelationshipRuleError,
    StorageError,
    StorageTimeoutError,
    StorageUnavailableError,
)
from scriptorium.data.schemas import HealthResponse
from scriptorium.router import collections_router, hierarchy_router, settings_router
from scriptorium.service.storage_service import StorageGateway

logger = logging.getLogger(__name__)

VERSION = "0.1.0"


def _error_handler(status_code: int):
    async def handler(request: Request, exc: Exception):
        return JSONResponse(status_code=status_code, content={"detail": str(exc)})

    return handler


def create_app(gateway: Optional[StorageGateway] = None) -> FastAPI:
    """Build the API around gateway (one configured from the environment by default)"""
    if gateway is None:
        gateway = StorageGateway(StorageConfig.from_env())

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Serving %s", gateway.database)
        yield
        await gateway.close()

    app = FastAPI(
        title="Scriptorium API",
        description="Local persistence API for a novel-writing workspace",
        version=VERSION,
        lifespan=lifespan,
    )
    app.state.gateway = gateway

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # handlers resolve along the MRO, so subclasses keep their own status
    app.add_exception_handler(StorageUnavailableError, _error_handler(503))
    app.add_exception_handler(StorageTimeoutError, _error_handler(504))
    app.add_exception_handler(StorageError, _error_handler(500))
    app.add_exception_handler(RelationshipRuleError, _error_handler(409))

    app.include_router(hierarchy_router)
    app.include_router(collections_router)
    app.include_router(settings_router)

    @app.get("/")
    def root():
        """Root endpoint"""
        return {
            "message": "Welcome to Scriptorium API",
            "version": VERSION,
            "docs": "/docs",
        }

    @app.get("/health", response_model=HealthResponse)
    def health_check():
        """Health check endpoint"""
        state = gateway.state
        return HealthResponse(
            status="unhealthy" if state == "unavailable" else "healthy",
            storage=state,
            schema_version=gateway.database.schema_version,
        )

    return app
