import logging
from pathlib import Path
from typing import Optional

from .config import load_config
from .dart_analysis_service import DartAnalysisService
from .dart_lsp_service import DartLSPService
from .errors import DartAnalyzerError
from .quick_info import build_tooltip

logger = logging.getLogger(__name__)

# Shared instances so the LSP session survives between calls; built on first use
lsp_service: Optional[DartLSPService] = None
analysis_service: Optional[DartAnalysisService] = None


def _shared_services() -> tuple[DartLSPService, DartAnalysisService]:
    global lsp_service, analysis_service
    if lsp_service is None:
        lsp_service = DartLSPService(load_config())
    if analysis_service is None:
        analysis_service = DartAnalysisService(lsp_service)
    return lsp_service, analysis_service


async def describe_symbol(
    file_path: str | Path,
    offset: int,
    markdown: bool = False,
) -> str:
    """
    Describe the symbol at an offset the way the hover tooltip would.

    Args:
        file_path: Path to the Dart file
        offset: Character offset of the symbol
        markdown: Whether to wrap output in a dart code block

    Returns:
        The tooltip text, or "" when the analyzer has nothing to say

    Raises:
        DartAnalyzerError: If the analyzer session cannot be initialized.
            get_hover would only report that as "no hover".
        DartVSConfigError: If the configuration is invalid on first use
    """
    lsp, analysis = _shared_services()
    if not await lsp.initialize_session():
        raise DartAnalyzerError(message="Failed to initialize Dart LSP session")

    hovers = await analysis.get_hover(str(file_path), offset)
    text = build_tooltip(hovers)
    if markdown and text:
        return f"```dart\n{text}\n```"
    return text
