# -*- coding: utf-8 -*-
# @file migrations.py
# @brief Additive, versioned declaration of collections and scope indexes
# @author sailing-innocent
# @date 2026-10-19

import logging
from typing import Optional

from sqlalchemy import select, update, insert
from sqlalchemy.engine import Connection

from scriptorium.data.errors import StorageUnavailableError
from scriptorium.data.orm import ORMBase, SCHEMA_VERSION, SCHEMA_VERSION_KEY

# importing the model package registers every collection on the metadata
from scriptorium.model import SchemaMeta

logger = logging.getLogger(__name__)


def get_stored_version(connection: Connection) -> Optional[int]:
    return connection.execute(
        select(SchemaMeta.value).where(SchemaMeta.key == SCHEMA_VERSION_KEY)
    ).scalar_one_or_none()


def set_stored_version(connection: Connection, version: int) -> None:
    if get_stored_version(connection) is None:
        connection.execute(
            insert(SchemaMeta).values(key=SCHEMA_VERSION_KEY, value=version)
        )
    else:
        connection.execute(
            update(SchemaMeta)
            .where(SchemaMeta.key == SCHEMA_VERSION_KEY)
            .values(value=version)
        )


def ensure_collections(connection: Connection) -> None:
    """Create missing tables, then any index missing from an existing table"""
    ORMBase.metadata.create_all(connection, checkfirst=True)
    for table in ORMBase.metadata.sorted_tables:
        for index in table.indexes:
            index.create(connection, checkfirst=True)


def upgrade(connection: Connection, declared_version: int = SCHEMA_VERSION) -> int:
    """Bring the store up to declared_version.

    Runs inside the caller's transaction. Nothing is dropped or rewritten, so
    running it against an already-migrated store changes nothing.

    Returns:
        The version stored before the upgrade (0 for a fresh store)
    """
    SchemaMeta.__table__.create(connection, checkfirst=True)
    stored = get_stored_version(connection)

    if stored is not None and stored > declared_version:
        raise StorageUnavailableError(
            f"Store schema version {stored} is newer than supported version "
            f"{declared_version}"
        )
    if stored == declared_version:
        return stored

    ensure_collections(connection)
    set_stored_version(connection, declared_version)
    logger.info(
        "Upgraded store schema from version %s to %s", stored or 0, declared_version
    )
    return stored or 0
