# -*- coding: utf-8 -*-
# @file character.py
# @brief ORM models for characters and character relationships
# @author sailing-innocent
# @date 2026-10-19

from sqlalchemy import Column, String, Integer, Boolean, Text, JSON

from scriptorium.data.orm import ORMBase


class Character(ORMBase):
    __tablename__ = "characters"

    id = Column(String, primary_key=True)
    workspace_id = Column(String, nullable=False, index=True)
    project_id = Column(String, nullable=False, index=True)
    book_id = Column(String, nullable=False, index=True)
    name = Column(String, nullable=False)
    description = Column(Text)
    color = Column(String)
    traits = Column(JSON, default=dict)  # ordered key -> scalar
    want = Column(Text)
    need = Column(Text)
    arc = Column(JSON, default=list)
    is_series_character = Column(Boolean, default=False)


class Relationship(ORMBase):
    """Directed edge between two characters of the same project"""

    __tablename__ = "relationships"

    id = Column(String, primary_key=True)
    workspace_id = Column(String, nullable=False, index=True)
    project_id = Column(String, nullable=False, index=True)
    book_id = Column(String, nullable=False, index=True)
    from_id = Column(String, nullable=False)
    to_id = Column(String, nullable=False)
    type = Column(String, default="neutral")  # ally | friend | lover | family | enemy | rival | mentor | neutral
    strength = Column(Integer, default=50)  # 0-100
    description = Column(Text)
