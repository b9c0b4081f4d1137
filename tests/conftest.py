import logging
import os
import sys

import pytest

PROJECT_ROOT = os.path.dirname(os.path.dirname(__file__))
SRC_DIR = os.path.join(PROJECT_ROOT, "src")
if SRC_DIR not in sys.path:
	sys.path.insert(0, SRC_DIR)

from locallogs import config
from locallogs.resolver import LogSource


@pytest.fixture
def clean_env(monkeypatch):
	"""No .env loading and no inherited locallogs settings."""
	monkeypatch.setattr(config, "_dotenv_loaded", True)
	monkeypatch.setattr(config, "_custom_dotenv_path", None)
	for key in ("LOGS_DIR", "LOG_EXTENSIONS", "LOCAL_LOGS_LOG_LEVEL", "DOTENV_PATH"):
		monkeypatch.delenv(key, raising=False)


@pytest.fixture
def logs_dir(tmp_path):
	path = tmp_path / "logs"
	path.mkdir()
	return path


@pytest.fixture
def source(logs_dir):
	return LogSource(logs_dir=str(logs_dir), extensions=(".log", ".txt"))


@pytest.fixture
def write_log(logs_dir):
	def _write(name, text, mtime=None):
		path = logs_dir / name
		path.write_bytes(text.encode("utf-8"))
		if mtime is not None:
			os.utime(path, (mtime, mtime))
		return path
	return _write


@pytest.fixture(autouse=True)
def reset_locallogs_logger():
	logger = logging.getLogger("locallogs")
	handlers, level, propagate = list(logger.handlers), logger.level, logger.propagate
	yield
	logger.handlers = handlers
	logger.setLevel(level)
	logger.propagate = propagate
