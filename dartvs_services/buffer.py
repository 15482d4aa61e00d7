"""
Text Buffer
Editor document text with an optional backing file and an edit version
File: dartvs_services/buffer.py
"""

import logging
from typing import Optional, Tuple
from pathlib import Path

logger = logging.getLogger(__name__)


class TextBuffer:
    """An open document as seen by the quick-info providers"""

    def __init__(self, text: str = "", file_path: Optional[str] = None, content_type: str = "dart"):
        self._text = text
        self.file_path = file_path
        self.content_type = content_type
        self.version = 0

    @classmethod
    def from_file(cls, file_path: str | Path) -> "TextBuffer":
        path = Path(file_path)
        with open(path, "r", encoding="utf-8") as f:
            return cls(f.read(), file_path=str(path))

    @property
    def text(self) -> str:
        return self._text

    @property
    def length(self) -> int:
        return len(self._text)

    def replace(self, text: str) -> None:
        """Replace the buffer contents, starting a new version"""
        self._text = text
        self.version += 1
        logger.debug(f"Buffer {self.file_path or '<unsaved>'} now at version {self.version}")

    def __repr__(self) -> str:
        return f"TextBuffer(file_path={self.file_path!r}, length={self.length}, version={self.version})"


def offset_to_position(text: str, offset: int) -> Tuple[int, int]:
    """Convert a character offset to a zero-based (line, character) pair"""
    offset = max(0, min(offset, len(text)))
    line = text.count("\n", 0, offset)
    line_start = text.rfind("\n", 0, offset) + 1
    return line, offset - line_start


def position_to_offset(text: str, line: int, character: int) -> int:
    """Convert a zero-based (line, character) pair to a character offset"""
    line_start = 0
    for _ in range(line):
        next_newline = text.find("\n", line_start)
        if next_newline == -1:
            return len(text)
        line_start = next_newline + 1

    line_end = text.find("\n", line_start)
    if line_end == -1:
        line_end = len(text)
    return min(line_start + character, line_end)
