# -*- coding: utf-8 -*-
# @file ids.py
# @brief Record identifier and timestamp helpers

import secrets
import time
from datetime import datetime, timezone


def new_record_id() -> str:
    """Timestamp-derived record id, e.g. ``1760870400123-3f9a1c``"""
    return f"{int(time.time() * 1000)}-{secrets.token_hex(3)}"


def utc_now() -> datetime:
    """Naive UTC now; SQLite keeps no tzinfo so records are stored naive"""
    return datetime.now(timezone.utc).replace(tzinfo=None)
