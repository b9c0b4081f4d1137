"""Read-only access to local application log files over MCP stdio."""

__version__ = "1.0.0"
