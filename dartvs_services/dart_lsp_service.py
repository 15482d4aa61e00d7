"""
Dart Analysis Server LSP Client
Low-level JSON-RPC communication with the Dart analysis server
File: dartvs_services/dart_lsp_service.py
"""

import json
import asyncio
import logging
from typing import Dict, Any, Optional
from pathlib import Path
from urllib.parse import unquote, urlparse

from .config import DartVSConfig

logger = logging.getLogger(__name__)


class DartLSPService:
    """Speaks the Language Server Protocol to a Dart analysis server over TCP"""

    def __init__(self, config: DartVSConfig = None):
        self.config = config or DartVSConfig()
        self.host = self.config.host
        self.port = self.config.port
        self.workspace_path = str(Path(self.config.workspace_path).resolve())
        self.request_id = 1
        self._initialized = False

    async def _create_connection(self, timeout: float = None) -> tuple[asyncio.StreamReader, asyncio.StreamWriter]:
        """Open a connection to the analysis server"""
        timeout = self.config.connect_timeout if timeout is None else timeout
        try:
            reader, writer = await asyncio.wait_for(
                asyncio.open_connection(self.host, self.port),
                timeout=timeout,
            )
            logger.debug(f"Connected to Dart analysis server at {self.host}:{self.port}")
            return reader, writer
        except (OSError, asyncio.TimeoutError) as e:
            logger.error(f"Failed to connect to analysis server: {e}")
            raise ConnectionError(
                f"Could not connect to Dart analysis server on {self.host}:{self.port}"
            )

    async def _send_message(self, writer: asyncio.StreamWriter, message: Dict[str, Any]) -> None:
        """Write one framed JSON-RPC message"""
        body = json.dumps(message).encode("utf-8")
        writer.write(f"Content-Length: {len(body)}\r\n\r\n".encode("ascii") + body)
        await writer.drain()

        logger.debug(f"Sent LSP message: {message.get('method', 'response')}")

    async def _receive_message(self, reader: asyncio.StreamReader, timeout: float = None) -> Optional[Dict[str, Any]]:
        """Read one framed JSON-RPC message, or None on timeout or EOF"""
        timeout = self.config.response_timeout if timeout is None else timeout
        try:
            header = await asyncio.wait_for(reader.readuntil(b"\r\n\r\n"), timeout=timeout)

            content_length = 0
            for line in header.decode("ascii").split("\r\n"):
                name, _, value = line.partition(":")
                if name.strip().lower() == "content-length":
                    content_length = int(value.strip())
                    break

            if content_length == 0:
                return None

            body = await asyncio.wait_for(reader.readexactly(content_length), timeout=timeout)
            message = json.loads(body.decode("utf-8"))
            if not isinstance(message, dict):
                logger.error(f"Malformed LSP message: expected an object, got {type(message).__name__}")
                return None

            logger.debug(f"Received LSP message: {message.get('method', 'response')}")
            return message

        except asyncio.TimeoutError:
            logger.warning("Timeout waiting for LSP message")
            return None
        except asyncio.IncompleteReadError:
            logger.debug("LSP connection closed by server")
            return None
        except (ValueError, UnicodeDecodeError) as e:
            logger.error(f"Malformed LSP message: {e}")
            return None

    async def _receive_response(self, reader: asyncio.StreamReader, request_id: int) -> Optional[Dict[str, Any]]:
        """Wait for the response matching request_id, skipping notifications"""
        while True:
            message = await self._receive_message(reader)
            if message is None:
                return None
            if message.get("id") == request_id and "method" not in message:
                return message
            logger.debug(f"Skipping unrelated LSP message: {message.get('method', message.get('id'))}")

    async def _send_request(self, method: str, params: Dict[str, Any] = None) -> Optional[Dict[str, Any]]:
        """Send a request and wait for its response"""
        request_id = self.request_id
        self.request_id += 1
        message = {
            "jsonrpc": "2.0",
            "id": request_id,
            "method": method,
            "params": params or {},
        }

        try:
            reader, writer = await self._create_connection()
        except ConnectionError as e:
            logger.error(f"Error sending LSP request {method}: {e}")
            return None

        try:
            await self._send_message(writer, message)
            response = await self._receive_response(reader, request_id)
        except OSError as e:
            logger.error(f"Error sending LSP request {method}: {e}")
            return None
        finally:
            await self._close(writer)

        if response and "error" in response:
            error = response["error"]
            detail = error.get("message") if isinstance(error, dict) else error
            logger.error(f"LSP request {method} failed: {detail}")
        return response

    async def _send_notification(self, method: str, params: Dict[str, Any] = None) -> bool:
        """Send a notification (no response expected)"""
        message = {
            "jsonrpc": "2.0",
            "method": method,
            "params": params or {},
        }

        try:
            reader, writer = await self._create_connection()
        except ConnectionError as e:
            logger.error(f"Error sending LSP notification {method}: {e}")
            return False

        try:
            await self._send_message(writer, message)
            return True
        except OSError as e:
            logger.error(f"Error sending LSP notification {method}: {e}")
            return False
        finally:
            await self._close(writer)

    async def _close(self, writer: asyncio.StreamWriter) -> None:
        writer.close()
        try:
            await writer.wait_closed()
        except OSError as e:
            logger.debug(f"Error closing LSP connection: {e}")

    async def test_connection(self) -> bool:
        """Check whether the analysis server accepts connections"""
        try:
            reader, writer = await self._create_connection(timeout=3.0)
        except ConnectionError:
            return False
        await self._close(writer)
        return True

    async def initialize_session(self) -> bool:
        """Initialize the LSP session with the server"""
        if self._initialized:
            return True

        if not Path(self.workspace_path).exists():
            logger.error(f"Workspace path does not exist: {self.workspace_path}")
            return False

        params = {
            "processId": None,
            "clientInfo": {"name": "DartVS", "version": "1.0.0"},
            "rootUri": Path(self.workspace_path).as_uri(),
            "capabilities": {
                "textDocument": {
                    "hover": {"contentFormat": ["markdown", "plaintext"]},
                    "synchronization": {"didSave": False},
                },
            },
        }

        response = await self._send_request("initialize", params)
        if response and "result" in response:
            await self._send_notification("initialized", {})
            self._initialized = True
            logger.info("LSP session initialized successfully")
            return True

        logger.error("Failed to initialize LSP session")
        return False

    async def open_document(self, file_path: str, text: Optional[str] = None) -> bool:
        """Open a document for analysis, reading it from disk unless text is given"""
        abs_path = self._resolve(file_path)
        if text is None:
            try:
                with open(abs_path, "r", encoding="utf-8") as f:
                    text = f.read()
            except OSError as e:
                logger.error(f"Error opening document {file_path}: {e}")
                return False

        params = {
            "textDocument": {
                "uri": abs_path.as_uri(),
                "languageId": "dart",
                "version": 1,
                "text": text,
            }
        }
        return await self._send_notification("textDocument/didOpen", params)

    async def close_document(self, file_path: str) -> bool:
        """Close a document"""
        params = {"textDocument": {"uri": self._file_to_uri(file_path)}}
        return await self._send_notification("textDocument/didClose", params)

    def _resolve(self, file_path: str) -> Path:
        abs_path = Path(file_path)
        if not abs_path.is_absolute():
            abs_path = Path(self.workspace_path) / file_path
        return abs_path

    def _file_to_uri(self, file_path: str) -> str:
        """Convert file path to URI"""
        return self._resolve(file_path).as_uri()

    def _uri_to_path(self, uri: str) -> str:
        """Convert URI to file path"""
        parsed = urlparse(uri)
        if parsed.scheme != "file":
            return uri
        return unquote(parsed.path)
