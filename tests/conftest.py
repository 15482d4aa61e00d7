from __future__ import annotations

import pytest

from dartvs_services.buffer import TextBuffer
from tests.helpers import FakeAnalysisService, FakeSession


@pytest.fixture
def buffer() -> TextBuffer:
    return TextBuffer("int x = 1;", file_path="/project/lib/main.dart")


@pytest.fixture
def session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def analysis() -> FakeAnalysisService:
    return FakeAnalysisService()
