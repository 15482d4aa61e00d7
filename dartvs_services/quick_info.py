"""
Dart Quick Info
Hover tooltips backed by asynchronous analysis-server queries
File: dartvs_services/quick_info.py

A hover trigger gets a "Loading..." placeholder straight away while the query
runs on the source's event loop. When the query finishes the host session is
asked to recalculate, and the second trigger at the same position is served
from the cached result instead of querying again.
"""

import asyncio
import logging
from dataclasses import replace
from typing import List, Optional, Protocol, Sequence, Set, Tuple

from .buffer import TextBuffer
from .config import DartVSConfig
from .dart_analysis_service import DartAnalysisService
from .dart_lsp_service import DartLSPService
from .errors import QuickInfoSourceClosedError
from .models import (
    HoverInformation,
    HoverOutcome,
    HoverState,
    HoverStatus,
    QuickInfoResult,
    TextSpan,
)

logger = logging.getLogger(__name__)

LOADING_TEXT = "Loading..."


class QuickInfoSession(Protocol):
    """The host's view of one hover tooltip"""

    def get_trigger_point(self, buffer: TextBuffer) -> Optional[int]: ...

    def recalculate(self) -> None: ...

    def dismiss(self) -> None: ...


class HoverProvider(Protocol):
    async def get_hover(self, file_path: str, offset: int, text: Optional[str] = None) -> List[HoverInformation]: ...


# ------------------------
# State transitions
# ------------------------

def build_tooltip(hovers: Optional[Sequence[Optional[HoverInformation]]]) -> str:
    """Tooltip text for the first hover entry, or "" when there is none"""
    if not hovers or hovers[0] is None:
        return ""

    first = hovers[0]
    type_info = first.element_description if first.element_description is not None else first.parameter
    return f"{type_info or ''}\n{first.dartdoc or ''}".strip()


def provisional_span(position: int, document_length: int) -> TextSpan:
    """One character either side of position, kept inside the document"""
    start = max(position - 1, 0)
    end = min(position + 1, document_length)
    return TextSpan(min(start, end), end)


def is_refresh(state: HoverState, position: int, snapshot_version: Optional[int] = None) -> bool:
    return (
        state.pending_position is not None
        and state.pending_position == position
        and state.snapshot_version == snapshot_version
    )


def start_request(
    state: HoverState,
    position: int,
    document_length: int,
    snapshot_version: Optional[int] = None,
) -> HoverState:
    return HoverState(
        status=HoverStatus.REQUESTING,
        pending_position=position,
        generation=state.generation + 1,
        snapshot_version=snapshot_version,
        tooltip_text=None,
        span=provisional_span(position, document_length),
    )


def complete_request(
    state: HoverState,
    generation: int,
    hovers: Optional[Sequence[Optional[HoverInformation]]],
) -> Tuple[HoverState, HoverOutcome]:
    """Fold a finished query into the state.

    Only the query stamped with the current generation may change anything.
    """
    if generation != state.generation or state.status is not HoverStatus.REQUESTING:
        return state, HoverOutcome.STALE

    text = build_tooltip(hovers)
    if not text:
        # Forget the position so that hovering here again re-queries.
        return replace(state, status=HoverStatus.DISMISSED, pending_position=None), HoverOutcome.DISMISS

    first = hovers[0]
    populated = replace(
        state,
        status=HoverStatus.POPULATED,
        tooltip_text=text,
        span=TextSpan.from_length(first.offset, first.length),
    )
    return populated, HoverOutcome.RECALCULATE


def refresh(state: HoverState, loading_text: str = LOADING_TEXT) -> QuickInfoResult:
    if state.tooltip_text is not None:
        return QuickInfoResult([state.tooltip_text], state.span)
    if state.status is HoverStatus.REQUESTING:
        return QuickInfoResult([loading_text], state.span)
    return QuickInfoResult()


# ------------------------
# Host-facing source and provider
# ------------------------

class QuickInfoSource:
    """Hover tooltip source for one text buffer.

    Must be driven from the event loop that owns it; query continuations are
    scheduled back onto that loop, so the state needs no locking.
    """

    def __init__(
        self,
        buffer: TextBuffer,
        analysis_service: HoverProvider,
        loop: Optional[asyncio.AbstractEventLoop] = None,
        loading_text: str = LOADING_TEXT,
    ):
        self.buffer = buffer
        self.analysis_service = analysis_service
        self.loading_text = loading_text
        self._loop = loop
        self._state = HoverState()
        self._tasks: Set[asyncio.Task] = set()
        self._closed = False

    @property
    def state(self) -> HoverState:
        return self._state

    @property
    def closed(self) -> bool:
        return self._closed

    def augment_quick_info_session(self, session: QuickInfoSession) -> QuickInfoResult:
        """Host entry point: fill in the tooltip for the session's trigger point"""
        return self.request_tooltip(session, session.get_trigger_point(self.buffer))

    def request_tooltip(self, session: QuickInfoSession, position: Optional[int]) -> QuickInfoResult:
        if self._closed:
            raise QuickInfoSourceClosedError("Quick info source has been closed")

        if position is None or not self.buffer.file_path:
            return QuickInfoResult()

        if is_refresh(self._state, position, self.buffer.version):
            return self.refresh_tooltip()

        self._state = start_request(self._state, position, self.buffer.length, self.buffer.version)
        generation = self._state.generation
        logger.debug(f"Hover request #{generation} at {self.buffer.file_path}@{position}")

        task = self._event_loop().create_task(
            self._query(session, generation, self.buffer.file_path, position, self.buffer.text)
        )
        self._tasks.add(task)
        task.add_done_callback(self._task_done)

        return QuickInfoResult([self.loading_text], self._state.span)

    def refresh_tooltip(self) -> QuickInfoResult:
        return refresh(self._state, self.loading_text)

    async def _query(self, session: QuickInfoSession, generation: int, file_path: str, position: int, text: str) -> None:
        try:
            hovers = await self.analysis_service.get_hover(file_path, position, text)
        except Exception:
            # A failed query means no tooltip, same as an empty result.
            self._state, outcome = complete_request(self._state, generation, [])
            if outcome is HoverOutcome.DISMISS:
                session.dismiss()
            raise

        self._state, outcome = complete_request(self._state, generation, hovers)
        logger.debug(f"Hover request #{generation} finished: {outcome.value}")

        if outcome is HoverOutcome.RECALCULATE:
            session.recalculate()
        elif outcome is HoverOutcome.DISMISS:
            session.dismiss()

    def _task_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error(f"Hover query failed for {self.buffer.file_path}", exc_info=error)

    def _event_loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def close(self) -> None:
        """Release the source: cancel outstanding queries and drop cached state"""
        if self._closed:
            return
        self._closed = True
        for task in list(self._tasks):
            task.cancel()
        self._state = HoverState()
        logger.debug(f"Closed quick info source for {self.buffer.file_path}")

    def __enter__(self) -> "QuickInfoSource":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class QuickInfoSourceProvider:
    """Creates a QuickInfoSource for each Dart text buffer"""

    content_type = "dart"
    name = "Dart Quick Info"

    def __init__(self, analysis_service: HoverProvider = None, config: DartVSConfig = None):
        self.config = config or DartVSConfig()
        self.analysis_service = analysis_service or DartAnalysisService(DartLSPService(self.config))

    def try_create_quick_info_source(self, buffer: TextBuffer) -> Optional[QuickInfoSource]:
        if buffer.content_type != self.content_type:
            return None
        return QuickInfoSource(buffer, self.analysis_service, loading_text=self.config.loading_text)
