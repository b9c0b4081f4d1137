# Configuration loading for locallogs

import logging
import os
import sys

from dotenv import find_dotenv, load_dotenv

DEFAULT_EXTENSIONS = ".log,.txt"

# Lazy load dotenv - only when config is first accessed
_dotenv_loaded = False
_custom_dotenv_path = None

def _getenv(name, default):
	value = os.getenv(name)
	return value if value else default

def parse_extensions(value):
	"""Split a comma-separated extension list, dropping blanks."""
	return tuple(ext.strip() for ext in value.split(",") if ext.strip())

class LocalLogsConfig:
	"""Loads configuration from environment variables and provides defaults."""
	def __init__(self):
		self.logs_dir = _getenv("LOGS_DIR", None)
		self.log_extensions = parse_extensions(_getenv("LOG_EXTENSIONS", DEFAULT_EXTENSIONS))
		self.log_level = _getenv("LOCAL_LOGS_LOG_LEVEL", "WARNING").upper()

def set_dotenv_path(path: str):
	"""Set a custom .env file path to load. Must be called before load_config()."""
	global _custom_dotenv_path, _dotenv_loaded
	_custom_dotenv_path = path
	_dotenv_loaded = False  # Reset to force reload with new path

def load_config() -> LocalLogsConfig:
	"""Return a config object with all settings loaded."""
	global _dotenv_loaded
	if not _dotenv_loaded:
		dotenv_path = os.getenv("DOTENV_PATH") or _custom_dotenv_path
		if dotenv_path:
			# Explicit files win over the inherited environment
			load_dotenv(dotenv_path, override=True)
		else:
			dotenv_path = find_dotenv(usecwd=True)
			if dotenv_path:
				load_dotenv(dotenv_path)
		_dotenv_loaded = True
	return LocalLogsConfig()

def configure_logging(level="WARNING"):
	"""Send locallogs diagnostics to stderr; stdout carries protocol lines only."""
	handler = logging.StreamHandler(sys.stderr)
	handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
	logger = logging.getLogger("locallogs")
	logger.handlers = [handler]
	logger.setLevel(getattr(logging, str(level).upper(), logging.WARNING))
	logger.propagate = False
	return logger
