# Filesystem access for log files - stdlib only, read-only

import logging
import os
import shutil
import subprocess
from typing import List, Optional, Tuple

logger = logging.getLogger(__name__)


class LogFileError(Exception):
	"""Base exception for log file access errors with user-friendly messages."""
	pass


class InvalidLogFileNameError(LogFileError):
	"""Raised when a file name points outside the log directory."""
	pass


def resolve_log_path(logs_dir, filename):
	"""Join filename onto logs_dir, refusing anything that escapes it."""
	base = os.path.abspath(logs_dir)
	path = os.path.normpath(os.path.join(base, filename))
	if path == base or os.path.commonpath([base, path]) != base:
		raise InvalidLogFileNameError(
			f"Log file name '{filename}' must name a file inside {logs_dir}"
		)
	return path


def scan_log_files(logs_dir, extensions) -> List[Tuple[str, str, os.stat_result]]:
	"""Return (name, path, stat) for regular files ending in one of extensions."""
	found = []
	with os.scandir(logs_dir) as entries:
		for entry in entries:
			if not entry.name.endswith(tuple(extensions)):
				continue
			if not entry.is_file():
				continue
			found.append((entry.name, os.path.abspath(entry.path), entry.stat()))
	return found


def _decode(data: bytes) -> str:
	return data.decode("utf-8", errors="replace")


def _drop_trailing_newline(text: str) -> str:
	return text[:-1] if text.endswith("\n") else text


def read_text(path) -> str:
	with open(path, "rb") as fh:
		return _decode(fh.read())


def read_lines(path) -> List[str]:
	"""Whole file split on newline, like the lines a search scans."""
	return read_text(path).split("\n")


def tail_command() -> Optional[str]:
	"""Path of a usable `tail` binary on POSIX hosts, else None."""
	if os.name != "posix":
		return None
	return shutil.which("tail")


def _tail_with_command(command, path, max_lines) -> str:
	proc = subprocess.run(
		[command, "-n", str(max_lines), "--", path],
		stdout=subprocess.PIPE,
		stderr=subprocess.PIPE,
		check=True,
	)
	return _drop_trailing_newline(_decode(proc.stdout))


def _tail_with_read(path, max_lines) -> str:
	lines = _drop_trailing_newline(read_text(path)).split("\n")
	return "\n".join(lines[-max_lines:])


def tail_lines(path, max_lines, command=None) -> str:
	"""Last max_lines lines of path joined with newlines.

	Uses the host `tail` binary when there is one and reads the whole file
	otherwise. Both produce the same text: one trailing newline is dropped
	before slicing, and bytes are decoded as UTF-8 with replacement.
	"""
	if max_lines <= 0:
		return ""
	if command is None:
		command = tail_command()
	if command:
		try:
			return _tail_with_command(command, path, max_lines)
		except (OSError, subprocess.CalledProcessError) as e:
			logger.debug("tail command failed for %s, reading file instead: %s", path, e)
	return _tail_with_read(path, max_lines)
