"""Concurrency helpers for fan-out / fan-in over Google API calls."""
import asyncio
from dataclasses import dataclass
from typing import Any, Awaitable, Iterable, List, Optional


@dataclass
class Settled:
    """Outcome of one awaited task: either a value or the error it raised."""
    ok: bool
    value: Any = None
    error: Optional[BaseException] = None


async def _settle(aw: Awaitable[Any]) -> Settled:
    try:
        return Settled(ok=True, value=await aw)
    except Exception as e:
        return Settled(ok=False, error=e)


async def settle_all(awaitables: Iterable[Awaitable[Any]]) -> List[Settled]:
    """
    Run all awaitables concurrently and wait for every one of them.

    Results keep the input order. A failing task yields Settled(ok=False)
    instead of cancelling its siblings.
    """
    return list(await asyncio.gather(*(_settle(aw) for aw in awaitables)))
