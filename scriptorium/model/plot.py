# -*- coding: utf-8 -*-
# @file plot.py
# @brief ORM models for plot structure and its project-level story records
# @author sailing-innocent
# @date 2026-10-19

from sqlalchemy import Column, String, Integer, Boolean, Float, Text, DateTime, JSON

from scriptorium.data.orm import ORMBase
from scriptorium.utils.ids import utc_now


class PlotStructure(ORMBase):
    """One plot structure per book; beats/themes/conflicts are embedded copies"""

    __tablename__ = "plot_structures"

    id = Column(String, primary_key=True)
    workspace_id = Column(String, nullable=False, index=True)
    project_id = Column(String, nullable=False, index=True)
    book_id = Column(String, nullable=False, index=True)
    target_word_count = Column(Integer, default=0)
    beats = Column(JSON, default=list)
    themes = Column(JSON, default=list)
    conflicts = Column(JSON, default=list)
    b_stories = Column(JSON, default=list)
    created_at = Column(DateTime, default=utc_now)
    updated_at = Column(DateTime, default=utc_now)


class Beat(ORMBase):
    __tablename__ = "beats"

    id = Column(String, primary_key=True)
    project_id = Column(String, nullable=False, index=True)
    name = Column(String, nullable=False)
    percentage = Column(Float, default=0.0)
    description = Column(Text, default="")
    content = Column(Text)
    word_count = Column(Integer)
    scene_ids = Column(JSON, default=list)
    is_completed = Column(Boolean, default=False)


class Theme(ORMBase):
    __tablename__ = "themes"

    id = Column(String, primary_key=True)
    project_id = Column(String, nullable=False, index=True)
    name = Column(String, nullable=False)
    description = Column(Text, default="")
    scene_ids = Column(JSON, default=list)
    intensity = Column(JSON, default=dict)  # scene id -> level


class Conflict(ORMBase):
    __tablename__ = "conflicts"

    id = Column(String, primary_key=True)
    project_id = Column(String, nullable=False, index=True)
    type = Column(String, default="external")  # internal | external
    description = Column(Text, default="")
    intensity = Column(Integer, default=5)  # 1-10
    beat_id = Column(String)
    scene_ids = Column(JSON, default=list)


class BStory(ORMBase):
    __tablename__ = "b_stories"

    id = Column(String, primary_key=True)
    project_id = Column(String, nullable=False, index=True)
    character_id = Column(String, nullable=False)
    name = Column(String, nullable=False)
    description = Column(Text, default="")
    scene_ids = Column(JSON, default=list)
    thematic_impact = Column(JSON, default=dict)  # scene id -> impact
