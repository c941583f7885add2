# -*- coding: utf-8 -*-
# @file note.py
# @brief ORM model for free-form notes
# @author sailing-innocent
# @date 2026-10-19

from sqlalchemy import Column, String, Text, DateTime, JSON

from scriptorium.data.orm import ORMBase
from scriptorium.utils.ids import utc_now


class Note(ORMBase):
    __tablename__ = "notes"

    id = Column(String, primary_key=True)
    workspace_id = Column(String, nullable=False, index=True)
    project_id = Column(String, nullable=False, index=True)
    book_id = Column(String, nullable=False, index=True)
    title = Column(String, nullable=False)
    content = Column(Text, default="")
    tags = Column(JSON, default=list)
    created_at = Column(DateTime, default=utc_now)
    updated_at = Column(DateTime, default=utc_now)
