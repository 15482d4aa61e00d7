"""
Dart Analysis Service
Hover queries against the Dart analysis server, expressed in document offsets
File: dartvs_services/dart_analysis_service.py
"""

import re
import logging
from typing import Dict, Any, List, Optional, Tuple

from .buffer import offset_to_position, position_to_offset
from .dart_lsp_service import DartLSPService
from .models import HoverInformation

logger = logging.getLogger(__name__)

_CODE_FENCE = re.compile(r"```[\w-]*\n(.*?)\n?```", re.DOTALL)
_RULE = re.compile(r"^\s*---\s*$", re.MULTILINE)


class DartAnalysisService:
    """Service answering "hover at file+offset" queries"""

    def __init__(self, lsp_service: DartLSPService = None):
        self.lsp_service = lsp_service or DartLSPService()

    async def get_hover(self, file_path: str, offset: int, text: Optional[str] = None) -> List[HoverInformation]:
        """
        Get hover information at a document offset.

        Args:
            file_path: Path of the Dart file
            offset: Character offset into the document
            text: Current document text; read from disk when omitted

        Returns:
            Hover entries for the offset, empty when nothing is available
        """
        logger.info(f"Getting hover info for {file_path}@{offset}")

        if text is None:
            try:
                with open(self.lsp_service._resolve(file_path), "r", encoding="utf-8") as f:
                    text = f.read()
            except OSError as e:
                logger.error(f"Error reading {file_path}: {e}")
                return []

        if not await self.lsp_service.initialize_session():
            logger.error("Hover unavailable: LSP session not initialized")
            return []

        if not await self.lsp_service.open_document(file_path, text):
            logger.error(f"Hover unavailable: failed to open document {file_path}")
            return []

        line, character = offset_to_position(text, offset)
        params = {
            "textDocument": {"uri": self.lsp_service._file_to_uri(file_path)},
            "position": {"line": line, "character": character},
        }

        try:
            response = await self.lsp_service._send_request("textDocument/hover", params)
        finally:
            await self.lsp_service.close_document(file_path)

        if not response or "result" not in response:
            logger.warning(f"No hover response for {file_path}@{offset}")
            return []

        result = response["result"]
        if not result:
            logger.debug(f"No hover information available at {file_path}@{offset}")
            return []

        if not isinstance(result, dict):
            logger.error(f"Malformed hover result for {file_path}@{offset}: {type(result).__name__}")
            return []

        return [self._process_hover_result(result, text, offset)]

    # ------------------------
    # Internal processing helpers
    # ------------------------

    def _process_hover_result(self, hover_result: Dict[str, Any], text: str, offset: int) -> HoverInformation:
        """Convert an LSP Hover into a HoverInformation entry"""
        content = self._hover_contents_to_text(hover_result.get("contents", ""))
        description, dartdoc = self._split_markdown(content)

        range_info = hover_result.get("range")
        if range_info:
            start = range_info.get("start", {})
            end = range_info.get("end", {})
            start_offset = position_to_offset(text, start.get("line", 0), start.get("character", 0))
            end_offset = position_to_offset(text, end.get("line", 0), end.get("character", 0))
            length = max(0, end_offset - start_offset)
        else:
            start_offset, length = offset, 0

        return HoverInformation(
            offset=start_offset,
            length=length,
            element_description=description,
            dartdoc=dartdoc,
        )

    def _hover_contents_to_text(self, contents: Any) -> str:
        """Flatten MarkupContent, MarkedString or a list of them into text"""
        if isinstance(contents, str):
            return contents
        elif isinstance(contents, dict):
            value = contents.get("value", "")
            language = contents.get("language")
            return f"```{language}\n{value}\n```" if language else value
        elif isinstance(contents, list):
            return "\n\n".join(self._hover_contents_to_text(item) for item in contents if item)
        return ""

    def _split_markdown(self, content: str) -> Tuple[Optional[str], Optional[str]]:
        """Split Dart hover markdown into (element description, dartdoc)"""
        rule = _RULE.search(content)
        if rule:
            head, doc = content[:rule.start()], content[rule.end():]
        else:
            head, doc = content, ""

        fence = _CODE_FENCE.search(head)
        description = fence.group(1) if fence else head

        description = description.strip() or None
        dartdoc = doc.strip() or None
        return description, dartdoc
