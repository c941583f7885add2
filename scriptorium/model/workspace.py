# -*- coding: utf-8 -*-
# @file workspace.py
# @brief ORM models for the workspace -> project -> book hierarchy
# @author sailing-innocent
# @date 2026-10-19

from sqlalchemy import Column, String, Integer, Text, DateTime, JSON

from scriptorium.data.orm import ORMBase
from scriptorium.utils.ids import utc_now


class Workspace(ORMBase):
    __tablename__ = "workspaces"

    id = Column(String, primary_key=True)
    name = Column(String, nullable=False)
    description = Column(Text)
    settings = Column(JSON)  # default_word_target, auto_backup, writing_goals
    created_at = Column(DateTime, default=utc_now)
    updated_at = Column(DateTime, default=utc_now)


class Project(ORMBase):
    __tablename__ = "projects"

    id = Column(String, primary_key=True)
    # Owner ids are plain indexed columns: the store never enforces parents
    workspace_id = Column(String, nullable=False, index=True)
    name = Column(String, nullable=False)
    description = Column(Text)
    type = Column(String, default="standalone")  # standalone | series | collection
    settings = Column(JSON)  # share_characters, share_world_building, series_order
    created_at = Column(DateTime, default=utc_now)
    updated_at = Column(DateTime, default=utc_now)


class Book(ORMBase):
    __tablename__ = "books"

    id = Column(String, primary_key=True)
    project_id = Column(String, nullable=False, index=True)
    workspace_id = Column(String, nullable=False, index=True)
    title = Column(String, nullable=False)
    subtitle = Column(String)
    description = Column(Text)
    genre = Column(String)
    status = Column(String, default="planning")  # planning | writing | editing | complete | published
    target_word_count = Column(Integer)
    current_word_count = Column(Integer)
    series_order = Column(Integer)
    settings = Column(JSON)  # use_series_characters, use_series_world
    created_at = Column(DateTime, default=utc_now)
    updated_at = Column(DateTime, default=utc_now)
