"""Tests for the one-shot describe helper."""

from __future__ import annotations

import importlib

import pytest

from dartvs_services import describe
from dartvs_services.errors import DartAnalyzerError, DartVSConfigError
from dartvs_services.models import HoverInformation


class StubLSP:
    def __init__(self, initializes: bool = True):
        self.initializes = initializes

    async def initialize_session(self):
        return self.initializes


class StubAnalysis:
    def __init__(self):
        self.calls = []

    async def get_hover(self, file_path, offset, text=None):
        self.calls.append((file_path, offset))
        return [HoverInformation(offset, 4, element_description="bool done", dartdoc="Finished?")]


@pytest.fixture
def stub_analysis(monkeypatch):
    analysis = StubAnalysis()
    monkeypatch.setattr(describe, "lsp_service", StubLSP())
    monkeypatch.setattr(describe, "analysis_service", analysis)
    return analysis


@pytest.mark.asyncio
async def test_describe_symbol(stub_analysis):
    assert await describe.describe_symbol("lib/main.dart", 12) == "bool done\nFinished?"
    assert stub_analysis.calls == [("lib/main.dart", 12)]


@pytest.mark.asyncio
async def test_describe_symbol_markdown(stub_analysis):
    text = await describe.describe_symbol("lib/main.dart", 12, markdown=True)
    assert text == "```dart\nbool done\nFinished?\n```"


@pytest.mark.asyncio
async def test_describe_symbol_fails_without_session(monkeypatch):
    analysis = StubAnalysis()
    monkeypatch.setattr(describe, "lsp_service", StubLSP(initializes=False))
    monkeypatch.setattr(describe, "analysis_service", analysis)

    with pytest.raises(DartAnalyzerError, match="Failed to initialize"):
        await describe.describe_symbol("lib/main.dart", 0)
    assert analysis.calls == []


def test_import_ignores_bad_environment(monkeypatch):
    monkeypatch.setenv("DARTVS_LSP_PORT", "not-a-port")
    monkeypatch.setattr(describe, "lsp_service", None)
    monkeypatch.setattr(describe, "analysis_service", None)

    reloaded = importlib.reload(describe)

    assert reloaded.lsp_service is None


@pytest.mark.asyncio
async def test_bad_config_surfaces_on_first_use(monkeypatch):
    monkeypatch.setenv("DARTVS_LSP_PORT", "not-a-port")
    monkeypatch.setattr(describe, "lsp_service", None)
    monkeypatch.setattr(describe, "analysis_service", None)

    with pytest.raises(DartVSConfigError, match="DARTVS_LSP_PORT"):
        await describe.describe_symbol("lib/main.dart", 0)
