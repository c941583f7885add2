# -*- coding: utf-8 -*-
# @file errors.py
# @brief Error types shared by the storage gateway and its callers
# @author sailing-innocent
# @date 2026-10-19

from typing import Optional


class StorageError(Exception):
    """Any failure reported by the storage gateway.

    The underlying engine error, when there is one, is kept on ``cause``
    (and chained as ``__cause__`` by the raiser).
    """

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause


class StorageUnavailableError(StorageError):
    """The database could not be opened or migrated; persistence is off."""


class StorageTimeoutError(StorageError):
    """An operation did not finish within the configured timeout."""


class RelationshipRuleError(ValueError):
    """A relationship was rejected before reaching the store."""
