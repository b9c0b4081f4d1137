# Read-only queries over the log directory

import logging
import os
from typing import Any, Dict, List, Optional

from ..formatting import extract_timestamp, format_bytes, format_mtime
from ..resolver import LogSource
from .reader import LogFileError, read_lines, resolve_log_path, scan_log_files, tail_lines

logger = logging.getLogger(__name__)

DEFAULT_LOG_FILE = "combined.log"
ERROR_LOG_FILE = "error.log"
DEFAULT_TAIL_LINES = 50
DEFAULT_ERROR_LINES = 20
DEFAULT_MAX_MATCHES = 10

# Content markers used by get_status
READY_MARKERS = ("Worker", "ready")
ERROR_MARKERS = ("error", "Error")


def _non_blank(content: str) -> List[str]:
	if not content:
		return []
	return [line for line in content.split("\n") if line.strip()]


def list_files(source: LogSource) -> Dict[str, Any]:
	"""Log files directly inside the log directory, most recently modified first."""
	if not os.path.isdir(source.logs_dir):
		return {
			"files": [],
			"message": "Logs directory not found. Server might be in development mode (console only).",
			"logsDir": source.logs_dir,
		}
	try:
		found = scan_log_files(source.logs_dir, source.extensions)
	except OSError as e:
		logger.warning("Cannot list %s: %s", source.logs_dir, e)
		return {"files": [], "error": str(e), "logsDir": source.logs_dir}

	found.sort(key=lambda item: item[2].st_mtime, reverse=True)
	files = [
		{
			"name": name,
			"size": st.st_size,
			"sizeHuman": format_bytes(st.st_size),
			"modified": format_mtime(st.st_mtime),
			"path": path,
		}
		for name, path, st in found
	]
	return {
		"files": files,
		"message": f"Found {len(files)} log files",
		"logsDir": source.logs_dir,
	}


def tail(source: LogSource, filename: str = DEFAULT_LOG_FILE, max_lines: int = DEFAULT_TAIL_LINES) -> Dict[str, Any]:
	"""Last max_lines lines of a log file plus a count of the non-blank ones."""
	try:
		path = resolve_log_path(source.logs_dir, filename)
		if not os.path.isfile(path):
			available = ", ".join(f["name"] for f in list_files(source)["files"])
			return {
				"content": "",
				"message": f"Log file {filename} not found. Available files: {available}",
				"filename": filename,
				"lines": 0,
			}
		content = tail_lines(path, max_lines)
		size = os.stat(path).st_size
	except (OSError, LogFileError) as e:
		logger.warning("Cannot tail %s: %s", filename, e)
		return {"content": "", "error": str(e), "filename": filename}

	actual_lines = len(_non_blank(content))
	return {
		"content": content,
		"message": f"Last {actual_lines} lines from {filename}",
		"filename": filename,
		"lines": actual_lines,
		"fileSize": size,
		"fileSizeHuman": format_bytes(size),
	}


def get_errors(source: LogSource, max_lines: int = DEFAULT_ERROR_LINES) -> Dict[str, Any]:
	result = tail(source, ERROR_LOG_FILE, max_lines)
	if result.get("content"):
		result["message"] = f"Found {result['lines']} error entries"
	else:
		result["message"] = "No errors found"
	return result


def get_status(source: LogSource) -> Dict[str, Any]:
	"""Best-effort health guess from the wording of recent log lines.

	This looks for literal substrings, not log levels: a recent combined.log
	line holding both "Worker" and "ready" means running, one holding
	"error"/"Error" means error, any recent line means active.
	"""
	combined = tail(source, DEFAULT_LOG_FILE, 10)
	errors = tail(source, ERROR_LOG_FILE, 5)

	recent_logs = _non_blank(combined.get("content", ""))[-5:]
	recent_errors = _non_blank(errors.get("content", ""))

	status = "unknown"
	if any(all(marker in line for marker in READY_MARKERS) for line in recent_logs):
		status = "running"
	elif any(any(marker in line for marker in ERROR_MARKERS) for line in recent_logs):
		status = "error"
	elif recent_logs:
		status = "active"

	return {
		"status": status,
		"recentLogs": recent_logs,
		"recentErrors": recent_errors,
		"errorCount": len(recent_errors),
		"logsAvailable": bool(combined.get("content")),
		"lastActivity": "recently active" if recent_logs else "no recent activity",
		"message": combined.get("message") or combined.get("error") or "No logs available",
	}


def watch(source: LogSource, filename: str = DEFAULT_LOG_FILE) -> Dict[str, Any]:
	"""Point-in-time size and mtime of a log file. Nothing is monitored."""
	try:
		path = resolve_log_path(source.logs_dir, filename)
		if not os.path.isfile(path):
			return {
				"watching": False,
				"exists": False,
				"message": f"Log file {filename} not found",
				"filename": filename,
			}
		st = os.stat(path)
	except (OSError, LogFileError) as e:
		logger.warning("Cannot stat %s: %s", filename, e)
		return {"watching": False, "error": str(e), "filename": filename}

	return {
		"watching": True,
		"exists": True,
		"file": filename,
		"size": st.st_size,
		"sizeHuman": format_bytes(st.st_size),
		"lastModified": format_mtime(st.st_mtime),
		"message": f"Snapshot of {filename}; poll again to see changes",
	}


def search(
	source: LogSource,
	query: Optional[str],
	filename: str = DEFAULT_LOG_FILE,
	max_matches: int = DEFAULT_MAX_MATCHES,
) -> Dict[str, Any]:
	"""Case-insensitive substring search, first max_matches hits in file order."""
	if not query:
		return {
			"matches": [],
			"query": query,
			"filename": filename,
			"matchCount": 0,
			"error": "query is required",
		}
	try:
		path = resolve_log_path(source.logs_dir, filename)
		if not os.path.isfile(path):
			return {
				"matches": [],
				"message": f"Log file {filename} not found",
				"query": query,
				"filename": filename,
				"matchCount": 0,
			}
		lines = read_lines(path)
	except (OSError, LogFileError) as e:
		logger.warning("Cannot search %s: %s", filename, e)
		return {"matches": [], "error": str(e), "query": query, "filename": filename}

	needle = query.lower()
	matches = []
	for number, line in enumerate(lines, start=1):
		if len(matches) >= max_matches:
			break
		if needle in line.lower():
			matches.append({
				"lineNumber": number,
				"content": line.strip(),
				"timestamp": extract_timestamp(line),
			})

	return {
		"matches": matches,
		"query": query,
		"filename": filename,
		"matchCount": len(matches),
		"message": f'Found {len(matches)} matches for "{query}" in {filename}',
	}
