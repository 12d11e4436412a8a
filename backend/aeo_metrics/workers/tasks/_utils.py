"""
Shared helpers for task modules
"""

import asyncio
from datetime import date
from typing import Optional
from uuid import UUID


def run_async(coro):
    """Run async function in sync context"""
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


def parse_uuid(value) -> UUID:
    return value if isinstance(value, UUID) else UUID(str(value))


def parse_date(value: Optional[str]) -> Optional[date]:
    """ISO date from a task argument; None passes through"""
    if value is None or isinstance(value, date):
        return value
    return date.fromisoformat(value)
