"""Tests for text buffers and offset conversion."""

from __future__ import annotations

import pytest

from dartvs_services.buffer import TextBuffer, offset_to_position, position_to_offset
from dartvs_services.models import TextSpan

TEXT = "import 'a.dart';\n\nvoid main() {}\n"


@pytest.mark.parametrize(
    "offset, position",
    [
        (0, (0, 0)),
        (7, (0, 7)),
        (17, (1, 0)),
        (18, (2, 0)),
        (23, (2, 5)),
        (len(TEXT), (3, 0)),
    ],
)
def test_offset_position_conversion(offset, position):
    assert offset_to_position(TEXT, offset) == position
    assert position_to_offset(TEXT, *position) == offset


def test_position_past_line_end_clamps_to_line():
    assert position_to_offset(TEXT, 0, 500) == TEXT.index("\n")


def test_position_past_last_line_clamps_to_end():
    assert position_to_offset(TEXT, 40, 0) == len(TEXT)


def test_replace_bumps_version():
    buffer = TextBuffer("a", file_path="a.dart")
    buffer.replace("abc")
    assert buffer.version == 1
    assert buffer.length == 3


def test_from_file(tmp_path):
    path = tmp_path / "main.dart"
    path.write_text(TEXT, encoding="utf-8")

    buffer = TextBuffer.from_file(path)

    assert buffer.text == TEXT
    assert buffer.file_path == str(path)
    assert buffer.content_type == "dart"


def test_span_helpers():
    span = TextSpan.from_length(5, 3)
    assert span == TextSpan(5, 8)
    assert span.contains(5) and span.contains(7) and not span.contains(8)
    assert span.clamp(6) == TextSpan(5, 6)
    assert span.clamp(2) == TextSpan(2, 2)


def test_span_rejects_inverted_range():
    with pytest.raises(ValueError):
        TextSpan(4, 2)
