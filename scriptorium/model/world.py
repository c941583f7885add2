# -*- coding: utf-8 -*-
# @file world.py
# @brief ORM models for world building: locations, events and rules
# @author sailing-innocent
# @date 2026-10-19

from sqlalchemy import Column, String, Integer, Boolean, Text, JSON

from scriptorium.data.orm import ORMBase


class Location(ORMBase):
    __tablename__ = "locations"

    id = Column(String, primary_key=True)
    workspace_id = Column(String, nullable=False, index=True)
    project_id = Column(String, nullable=False, index=True)
    book_id = Column(String, nullable=False, index=True)
    name = Column(String, nullable=False)
    type = Column(String, default="other")  # city | building | region | landmark | natural | other
    description = Column(Text)
    parent_id = Column(String)
    coordinates = Column(JSON)  # {"x": .., "y": ..}
    color = Column(String)
    properties = Column(JSON, default=dict)
    # May reference locations that no longer exist; readers skip those
    connections = Column(JSON, default=list)
    is_series_location = Column(Boolean, default=False)


class WorldEvent(ORMBase):
    __tablename__ = "world_events"

    id = Column(String, primary_key=True)
    workspace_id = Column(String, nullable=False, index=True)
    project_id = Column(String, nullable=False, index=True)
    book_id = Column(String, nullable=False, index=True)
    name = Column(String, nullable=False)
    description = Column(Text)
    date = Column(String, default="")  # free text, fictional calendars allowed
    type = Column(String, default="other")  # historical | political | natural | cultural | personal | other
    location_ids = Column(JSON, default=list)
    character_ids = Column(JSON, default=list)
    importance = Column(Integer, default=5)  # 0-10
    consequences = Column(Text)
    is_series_event = Column(Boolean, default=False)


class WorldRule(ORMBase):
    __tablename__ = "world_rules"

    id = Column(String, primary_key=True)
    workspace_id = Column(String, nullable=False, index=True)
    project_id = Column(String, nullable=False, index=True)
    book_id = Column(String, nullable=False, index=True)
    category = Column(String, default="other")  # magic | technology | society | physics | culture | other
    title = Column(String, nullable=False)
    description = Column(Text, default="")
    examples = Column(JSON, default=list)
    limitations = Column(JSON, default=list)
    is_series_rule = Column(Boolean, default=False)
