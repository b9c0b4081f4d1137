"""MCP stdio server for locallogs - lets AI assistants read local log files."""

import json
import logging
import sys
from typing import Any, Callable, Dict, Mapping, Optional

import mcp.types as types

from .. import __version__
from ..config import configure_logging, load_config
from ..logfiles import queries
from ..resolver import LogSource, load_log_source

logger = logging.getLogger(__name__)

PROTOCOL_VERSION = "2024-11-05"
SERVER_NAME = "local-logs-mcp-server"


TOOLS = (
    types.Tool(
        name="get_log_files",
        description="Get list of available log files with metadata",
        inputSchema={"type": "object", "properties": {}, "required": []},
    ),
    types.Tool(
        name="tail_log",
        description="Get the last N lines from a log file",
        inputSchema={
            "type": "object",
            "properties": {
                "filename": {
                    "type": "string",
                    "description": "Name of the log file (default: combined.log)",
                    "default": queries.DEFAULT_LOG_FILE,
                },
                "lines": {
                    "type": "integer",
                    "description": "Number of lines to return (default: 50)",
                    "default": queries.DEFAULT_TAIL_LINES,
                },
            },
            "required": [],
        },
    ),
    types.Tool(
        name="get_errors",
        description="Get recent error log entries",
        inputSchema={
            "type": "object",
            "properties": {
                "lines": {
                    "type": "integer",
                    "description": "Number of error lines to return (default: 20)",
                    "default": queries.DEFAULT_ERROR_LINES,
                },
            },
            "required": [],
        },
    ),
    types.Tool(
        name="get_server_status",
        description="Get a best-effort server status summary inferred from recent log lines",
        inputSchema={"type": "object", "properties": {}, "required": []},
    ),
    types.Tool(
        name="watch_log",
        description="Get the current size and modification time of a log file (one-shot snapshot)",
        inputSchema={
            "type": "object",
            "properties": {
                "filename": {
                    "type": "string",
                    "description": "Name of the log file to check (default: combined.log)",
                    "default": queries.DEFAULT_LOG_FILE,
                },
            },
            "required": [],
        },
    ),
    types.Tool(
        name="search_logs",
        description="Search for specific text in a log file (case-insensitive)",
        inputSchema={
            "type": "object",
            "properties": {
                "query": {
                    "type": "string",
                    "description": "Text to search for in logs",
                },
                "filename": {
                    "type": "string",
                    "description": "Log file to search (default: combined.log)",
                    "default": queries.DEFAULT_LOG_FILE,
                },
                "lines": {
                    "type": "integer",
                    "description": "Number of matching lines to return (default: 10)",
                    "default": queries.DEFAULT_MAX_MATCHES,
                },
            },
            "required": ["query"],
        },
    ),
)


def _arg(arguments: Mapping[str, Any], key: str, default: Any) -> Any:
    value = arguments.get(key)
    return default if value is None else value


def _int_arg(arguments: Mapping[str, Any], key: str, default: int) -> int:
    return int(_arg(arguments, key, default))


def _get_log_files(source: LogSource, arguments: Mapping[str, Any]) -> Dict[str, Any]:
    return queries.list_files(source)


def _tail_log(source: LogSource, arguments: Mapping[str, Any]) -> Dict[str, Any]:
    return queries.tail(
        source,
        _arg(arguments, "filename", queries.DEFAULT_LOG_FILE),
        _int_arg(arguments, "lines", queries.DEFAULT_TAIL_LINES),
    )


def _get_errors(source: LogSource, arguments: Mapping[str, Any]) -> Dict[str, Any]:
    return queries.get_errors(source, _int_arg(arguments, "lines", queries.DEFAULT_ERROR_LINES))


def _get_server_status(source: LogSource, arguments: Mapping[str, Any]) -> Dict[str, Any]:
    return queries.get_status(source)


def _watch_log(source: LogSource, arguments: Mapping[str, Any]) -> Dict[str, Any]:
    return queries.watch(source, _arg(arguments, "filename", queries.DEFAULT_LOG_FILE))


def _search_logs(source: LogSource, arguments: Mapping[str, Any]) -> Dict[str, Any]:
    query = arguments.get("query")
    return queries.search(
        source,
        str(query) if query is not None else None,
        _arg(arguments, "filename", queries.DEFAULT_LOG_FILE),
        _int_arg(arguments, "lines", queries.DEFAULT_MAX_MATCHES),
    )


ToolHandler = Callable[[LogSource, Mapping[str, Any]], Dict[str, Any]]

TOOL_HANDLERS: Dict[str, ToolHandler] = {
    "get_log_files": _get_log_files,
    "tail_log": _tail_log,
    "get_errors": _get_errors,
    "get_server_status": _get_server_status,
    "watch_log": _watch_log,
    "search_logs": _search_logs,
}


class ToolExecutionError(Exception):
    """Raised when a tools/call request names an unknown tool or its handler fails."""
    pass


def _response(request_id: Any, result: Dict[str, Any]) -> Dict[str, Any]:
    return {"jsonrpc": "2.0", "id": request_id, "result": result}


def _error_response(request_id: Any, code: int, message: str, data: str) -> Dict[str, Any]:
    error = types.ErrorData(code=code, message=message, data=data)
    return {"jsonrpc": "2.0", "id": request_id, "error": error.model_dump()}


class Dispatcher:
    """Routes one JSON-RPC message at a time.

    Nothing is kept between requests. The log source, tool descriptors and
    tool handlers are fixed at construction.
    """

    def __init__(
        self,
        source: LogSource,
        tools=TOOLS,
        tool_handlers: Optional[Mapping[str, ToolHandler]] = None,
    ):
        self.source = source
        self.tools = tuple(tools)
        self.tool_handlers = dict(TOOL_HANDLERS if tool_handlers is None else tool_handlers)
        self.methods = {
            "initialize": self._initialize,
            "notifications/initialized": self._initialized,
            "tools/list": self._list_tools,
            "tools/call": self._call_tool,
        }

    def _initialize(self, params):
        result = types.InitializeResult(
            protocolVersion=PROTOCOL_VERSION,
            capabilities=types.ServerCapabilities(tools=types.ToolsCapability()),
            serverInfo=types.Implementation(name=SERVER_NAME, version=__version__),
        )
        return result.model_dump(by_alias=True, exclude_none=True)

    def _initialized(self, params):
        # Notification: no response line
        return None

    def _list_tools(self, params):
        return {"tools": [tool.model_dump(by_alias=True, exclude_none=True) for tool in self.tools]}

    def _call_tool(self, params):
        if "name" not in params:
            raise ValueError("tools/call requires a tool name")
        name = params["name"]
        arguments = params.get("arguments") or {}
        handler = self.tool_handlers.get(name)
        if handler is None:
            raise ToolExecutionError(f"Unknown tool: {name}")
        logger.debug("Calling tool %s with %r", name, arguments)
        try:
            result = handler(self.source, arguments)
        except Exception as e:
            raise ToolExecutionError(str(e)) from e
        content = types.TextContent(type="text", text=json.dumps(result, indent=2))
        return {"content": [content.model_dump(by_alias=True, exclude_none=True)]}

    def handle_message(self, message: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Answer a decoded request envelope, or return None for notifications."""
        request_id = message.get("id")
        method = message.get("method")
        handler = self.methods.get(method) if isinstance(method, str) else None
        if handler is None:
            return _error_response(
                request_id, types.METHOD_NOT_FOUND, "Method not found", f"Unknown method: {method}"
            )

        try:
            result = handler(message.get("params") or {})
        except ToolExecutionError as e:
            logger.warning("Tool execution failed: %s", e)
            return _error_response(request_id, types.INTERNAL_ERROR, "Tool execution failed", str(e))
        except Exception as e:
            logger.exception("Error handling method %s", method)
            return _error_response(request_id, types.INTERNAL_ERROR, "Internal error", str(e))

        if result is None:
            return None
        return _response(request_id, result)

    def handle_line(self, line: str) -> Optional[Dict[str, Any]]:
        """Decode one input line and answer it."""
        try:
            message = json.loads(line)
        except (ValueError, RecursionError) as e:
            logger.error("Invalid JSON: %.200s", line)
            return _error_response(None, types.PARSE_ERROR, "Parse error", str(e))
        if not isinstance(message, dict):
            return _error_response(None, types.PARSE_ERROR, "Parse error", "Request must be a JSON object")
        return self.handle_message(message)


def serve(dispatcher: Dispatcher, stdin=None, stdout=None) -> None:
    """Answer newline-delimited requests in order until stdin reaches EOF.

    stdin is read as bytes; stdout receives one JSON document per line.
    """
    if stdin is None:
        stdin = sys.stdin.buffer
    if stdout is None:
        stdout = sys.stdout
    for raw in iter(stdin.readline, b""):
        line = raw.decode("utf-8", errors="replace").strip()
        if not line:
            continue
        response = dispatcher.handle_line(line)
        if response is not None:
            stdout.write(json.dumps(response) + "\n")
            stdout.flush()
    logger.info("Input closed, shutting down")


def create_dispatcher(cfg=None, cwd: Optional[str] = None) -> Dispatcher:
    """Resolve the log directory once and build a dispatcher around it."""
    if cfg is None:
        cfg = load_config()
    return Dispatcher(load_log_source(cfg, cwd=cwd))


def main():
    """Run the MCP server on stdin/stdout."""
    cfg = load_config()
    configure_logging(cfg.log_level)
    dispatcher = create_dispatcher(cfg)
    logger.info("Serving logs from %s", dispatcher.source.logs_dir)
    serve(dispatcher)
    return 0


if __name__ == "__main__":
    sys.exit(main())
