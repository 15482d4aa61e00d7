from __future__ import annotations

import asyncio

from dartvs_services.buffer import TextBuffer
from dartvs_services.models import HoverInformation


class FakeSession:
    def __init__(self, trigger_point: int | None = None):
        self.trigger_point = trigger_point
        self.recalculations = 0
        self.dismissals = 0

    def get_trigger_point(self, buffer: TextBuffer) -> int | None:
        return self.trigger_point

    def recalculate(self) -> None:
        self.recalculations += 1

    def dismiss(self) -> None:
        self.dismissals += 1


class FakeAnalysisService:
    """Hands out one future per hover query so tests decide when each finishes."""

    def __init__(self):
        self.calls: list[tuple[str, int, str | None]] = []
        self.pending: list[asyncio.Future] = []

    async def get_hover(self, file_path: str, offset: int, text: str | None = None) -> list[HoverInformation]:
        future = asyncio.get_running_loop().create_future()
        self.calls.append((file_path, offset, text))
        self.pending.append(future)
        return await future


async def settle() -> None:
    for _ in range(5):
        await asyncio.sleep(0)
