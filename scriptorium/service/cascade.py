# -*- coding: utf-8 -*-
# @file cascade.py
# @brief Batch of delete steps applied as one transaction

from typing import Iterable, List

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import Executable


class CascadeBatch:
    """Ordered delete statements for one cascade.

    The batch only collects statements; :meth:`apply` runs them on a session
    whose transaction the caller owns. A failing step aborts that
    transaction, and every earlier step is rolled back with it.
    """

    def __init__(self, label: str):
        self.label = label
        self.steps: List[Executable] = []

    def __len__(self) -> int:
        return len(self.steps)

    def add(self, statement: Executable) -> "CascadeBatch":
        self.steps.append(statement)
        return self

    def delete_where(self, model, column: str, value: str) -> "CascadeBatch":
        """Delete every row of model whose column equals value"""
        return self.add(delete(model).where(getattr(model, column) == value))

    def delete_in(self, model, column: str, values: Iterable[str]) -> "CascadeBatch":
        values = list(values)
        if values:
            self.add(delete(model).where(getattr(model, column).in_(values)))
        return self

    async def apply(self, session: AsyncSession) -> int:
        """Run every step in order; returns the number of rows removed"""
        removed = 0
        for statement in self.steps:
            result = await session.execute(statement)
            if result.rowcount and result.rowcount > 0:
                removed += result.rowcount
        return removed
