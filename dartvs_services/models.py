"""
Hover Models
Value types shared by the analysis client and the quick-info coordinator
File: dartvs_services/models.py
"""

from enum import Enum
from dataclasses import dataclass, field
from typing import List, Optional


@dataclass(frozen=True)
class HoverInformation:
    """One hover entry returned by the Dart analysis server"""

    offset: int
    length: int
    element_description: Optional[str] = None
    parameter: Optional[str] = None
    dartdoc: Optional[str] = None


@dataclass(frozen=True)
class TextSpan:
    """Half-open range [start, end) of document offsets"""

    start: int
    end: int

    def __post_init__(self):
        if self.start < 0 or self.end < self.start:
            raise ValueError(f"Invalid span [{self.start}, {self.end})")

    @classmethod
    def from_length(cls, start: int, length: int) -> "TextSpan":
        return cls(start, start + length)

    @property
    def length(self) -> int:
        return self.end - self.start

    def contains(self, offset: int) -> bool:
        return self.start <= offset < self.end

    def clamp(self, document_length: int) -> "TextSpan":
        start = min(self.start, document_length)
        return TextSpan(start, max(start, min(self.end, document_length)))


class HoverStatus(str, Enum):
    IDLE = "idle"
    REQUESTING = "requesting"
    POPULATED = "populated"
    DISMISSED = "dismissed"


class HoverOutcome(str, Enum):
    """What a finished hover query asks of the host session"""

    RECALCULATE = "recalculate"
    DISMISS = "dismiss"
    STALE = "stale"


@dataclass(frozen=True)
class HoverState:
    """Per-view hover request state.

    ``tooltip_text`` and ``span`` only ever describe ``pending_position``;
    ``generation`` identifies the query that is allowed to fill them.
    """

    status: HoverStatus = HoverStatus.IDLE
    pending_position: Optional[int] = None
    generation: int = 0
    snapshot_version: Optional[int] = None
    tooltip_text: Optional[str] = None
    span: Optional[TextSpan] = None


@dataclass
class QuickInfoResult:
    """Tooltip content plus the range of the document it applies to"""

    content: List[str] = field(default_factory=list)
    applicable_to_span: Optional[TextSpan] = None

    @property
    def is_empty(self) -> bool:
        return not self.content
