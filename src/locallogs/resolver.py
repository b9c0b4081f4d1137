# Log directory discovery

import logging
import os
from typing import NamedTuple, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)

# Checked in order below <cwd>, after <cwd>/logs
NESTED_LOG_DIRS = (
	("apps", "backend", "logs"),
	("server", "logs"),
	("backend", "logs"),
)


class LogSource(NamedTuple):
	"""Where queries read from. Computed once at startup, never mutated."""
	logs_dir: str
	extensions: Tuple[str, ...]


def system_log_dirs() -> Tuple[str, ...]:
	if os.name == "nt":
		return ("C:\\logs",)
	return ("/var/log",)


def candidate_dirs(override: Optional[str], cwd: str, system_dirs: Sequence[str]) -> list:
	candidates = []
	if override:
		candidates.append(os.path.join(cwd, override))
	candidates.append(os.path.join(cwd, "logs"))
	for parts in NESTED_LOG_DIRS:
		candidates.append(os.path.join(cwd, *parts))
	candidates.extend(system_dirs)
	return candidates


def resolve_logs_dir(
	override: Optional[str] = None,
	cwd: Optional[str] = None,
	system_dirs: Optional[Sequence[str]] = None,
) -> str:
	"""Return the first existing candidate directory as an absolute path.

	Falls back to <cwd>/logs even when it does not exist; queries treat a
	missing directory as holding no files.
	"""
	cwd = os.path.abspath(cwd or os.getcwd())
	if system_dirs is None:
		system_dirs = system_log_dirs()
	for path in candidate_dirs(override, cwd, system_dirs):
		if os.path.isdir(path):
			logger.debug("Using log directory %s", path)
			return os.path.abspath(path)
	fallback = os.path.join(cwd, "logs")
	logger.debug("No log directory found, defaulting to %s", fallback)
	return fallback


def load_log_source(cfg, cwd: Optional[str] = None, system_dirs: Optional[Sequence[str]] = None) -> LogSource:
	"""Freeze the configured directory and extensions into a LogSource."""
	logs_dir = resolve_logs_dir(cfg.logs_dir, cwd=cwd, system_dirs=system_dirs)
	return LogSource(logs_dir=logs_dir, extensions=tuple(cfg.log_extensions))
