"""Dart editor services for Visual Studio style hosts.

Hover tooltips backed by the Dart analysis server, plus the Dart project
property pages, all importable from one namespace::

    from dartvs_services import QuickInfoSourceProvider, TextBuffer
"""

from .buffer import TextBuffer
from .config import DartVSConfig, load_config
from .dart_analysis_service import DartAnalysisService
from .dart_lsp_service import DartLSPService
from .errors import DartAnalyzerError
from .models import HoverInformation, HoverState, QuickInfoResult, TextSpan
from .property_pages import DartProjectPropertyPage, MavenComponentSelector
from .quick_info import QuickInfoSource, QuickInfoSourceProvider
from .registry import ExtensionRegistry, build_default_registry

__all__ = [
    "TextBuffer",
    "DartVSConfig",
    "load_config",
    "DartAnalysisService",
    "DartLSPService",
    "DartAnalyzerError",
    "HoverInformation",
    "HoverState",
    "QuickInfoResult",
    "TextSpan",
    "DartProjectPropertyPage",
    "MavenComponentSelector",
    "QuickInfoSource",
    "QuickInfoSourceProvider",
    "ExtensionRegistry",
    "build_default_registry",
]
