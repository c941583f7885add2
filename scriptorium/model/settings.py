# -*- coding: utf-8 -*-
# @file settings.py
# @brief ORM models for singleton records: app settings and schema metadata
# @author sailing-innocent
# @date 2026-10-19

from sqlalchemy import Column, String, Integer, Boolean, Float

from scriptorium.data.orm import ORMBase


class AppSettingsRow(ORMBase):
    __tablename__ = "settings"

    key = Column(String, primary_key=True)  # always SETTINGS_KEY
    openai_key = Column(String)
    anthropic_key = Column(String)
    auto_save = Column(Boolean, default=True)
    writing_mode = Column(String, default="standard")  # focus | standard | typewriter
    font_size = Column(Integer, default=16)
    line_height = Column(Float, default=1.7)
    theme = Column(String, default="dark")  # light | dark
    credits = Column(Integer, default=0)
    free_queries_left = Column(Integer, default=5)


class SchemaMeta(ORMBase):
    __tablename__ = "schema_meta"

    key = Column(String, primary_key=True)
    value = Column(Integer, nullable=False)
