# -*- coding: utf-8 -*-
# @file orm.py
# @brief The ORM Base Class and schema version
# @author sailing-innocent
# @date 2026-10-19
# @version 1.0
# ---------------------------------

from sqlalchemy.orm import DeclarativeBase

# Bump whenever a collection or index is added; upgrades are additive only
SCHEMA_VERSION = 5

SETTINGS_KEY = "app"
SCHEMA_VERSION_KEY = "schema_version"


# Base class for ORM
class ORMBase(DeclarativeBase):
    pass
