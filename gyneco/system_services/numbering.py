# gyneco/system_services/numbering.py
"""
Year-scoped sequential numbers for reports and invoices.

A number looks like ``REF-2025-0007``. The sequence part is *recomputed* on
every call as the count of existing rows whose number carries the current
year prefix, plus one. Nothing is persisted between calls, so deleting a row
lowers the count and the next number can repeat one already issued; when that
number still exists the insert fails on the unique index. Switching to a
persisted counter would change the numbers users see, so the count rule stays.

Count and insert are only race-free when serialized, hence one
``asyncio.Lock`` per (entity type, year).
"""
import asyncio
from typing import Iterable

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

SEQUENCE_DIGITS = 4


def year_prefix(prefix: str, year: int) -> str:
    return f"{prefix}-{year}-"


def format_number(prefix: str, year: int, sequence: int) -> str:
    return f"{year_prefix(prefix, year)}{sequence:0{SEQUENCE_DIGITS}d}"


def next_number_from(prefix: str, year: int, existing: Iterable[str]) -> str:
    """Count-based rule applied to numbers already in memory."""
    marker = year_prefix(prefix, year)
    count = sum(1 for number in existing if number and number.startswith(marker))
    return format_number(prefix, year, count + 1)


class SequentialNumberer:
    """Computes the next number of one entity type against the SQL store."""

    def __init__(self, entity: str, prefix: str, column):
        self.entity = entity
        self.prefix = prefix
        self.column = column
        self._locks: dict[tuple[str, int], asyncio.Lock] = {}

    def lock_for(self, year: int) -> asyncio.Lock:
        key = (self.entity, year)
        if key not in self._locks:
            self._locks[key] = asyncio.Lock()
        return self._locks[key]

    async def next_number(self, session: AsyncSession, year: int) -> str:
        # The prefix is made of letters, digits and dashes: no LIKE escaping needed
        stmt = select(func.count()).where(self.column.like(f"{year_prefix(self.prefix, year)}%"))
        count = (await session.execute(stmt)).scalar_one()
        return format_number(self.prefix, year, count + 1)
