# -*- coding: utf-8 -*-
# @file document.py
# @brief ORM models for documents (sheets) and document groups
# @author sailing-innocent
# @date 2026-10-19

from sqlalchemy import Column, String, Integer, Boolean, Text, DateTime, JSON

from scriptorium.data.orm import ORMBase
from scriptorium.utils.ids import utc_now


class Document(ORMBase):
    __tablename__ = "documents"

    id = Column(String, primary_key=True)
    workspace_id = Column(String, nullable=False, index=True)
    project_id = Column(String, nullable=False, index=True)
    book_id = Column(String, nullable=False, index=True)
    group_id = Column(String, index=True)
    title = Column(String, nullable=False)
    content = Column(Text, default="")
    order = Column(Integer)
    status = Column(String, default="draft")  # draft | in-progress | complete
    target = Column(Integer)  # word count target
    notes = Column(JSON, default=list)
    tags = Column(JSON, default=list)
    deadline = Column(DateTime)
    created_at = Column(DateTime, default=utc_now)
    updated_at = Column(DateTime, default=utc_now)


class Group(ORMBase):
    __tablename__ = "groups"

    id = Column(String, primary_key=True)
    workspace_id = Column(String, nullable=False, index=True)
    project_id = Column(String, nullable=False, index=True)
    book_id = Column(String, nullable=False, index=True)
    name = Column(String, nullable=False)
    description = Column(Text)
    color = Column(String)
    parent_id = Column(String)
    order = Column(Integer, default=0)
    is_expanded = Column(Boolean, default=True)
    type = Column(String, default="folder")  # folder | filter
