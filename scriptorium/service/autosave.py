# -*- coding: utf-8 -*-
# @file autosave.py
# @brief Debounced saving of records edited in bursts

import asyncio
import logging
from typing import Awaitable, Callable, Dict, List

logger = logging.getLogger(__name__)


class AutoSaver:
    """Collapse rapid edits of the same record into a single save.

    Each :meth:`schedule` restarts the record's timer; the save runs once
    ``delay`` seconds pass without a newer edit, with the latest version.
    Must be used from inside a running event loop.
    """

    def __init__(self, save: Callable[..., Awaitable], delay: float = 1.0):
        self.save = save
        self.delay = delay
        self._pending: Dict[str, object] = {}
        self._timers: Dict[str, asyncio.Task] = {}

    @property
    def pending_ids(self) -> List[str]:
        return list(self._pending)

    def schedule(self, record) -> None:
        self._pending[record.id] = record
        timer = self._timers.pop(record.id, None)
        if timer is not None:
            timer.cancel()
        self._timers[record.id] = asyncio.get_running_loop().create_task(
            self._save_later(record.id)
        )

    async def _save_later(self, record_id: str) -> None:
        await asyncio.sleep(self.delay)
        self._timers.pop(record_id, None)
        record = self._pending.pop(record_id, None)
        if record is None:
            return
        try:
            await self.save(record)
        except Exception as e:
            logger.error("Auto-save of %s failed: %s", record_id, e)
            # keep it for the next flush unless a newer edit arrived meanwhile
            self._pending.setdefault(record_id, record)

    async def flush(self) -> int:
        """Save every pending record now; returns how many were saved"""
        for timer in self._timers.values():
            timer.cancel()
        self._timers.clear()

        saved = 0
        while self._pending:
            record_id = next(iter(self._pending))
            record = self._pending[record_id]
            await self.save(record)
            if self._pending.get(record_id) is record:
                del self._pending[record_id]
            saved += 1
        return saved
