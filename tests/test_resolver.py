# Tests for log directory discovery

import os

from locallogs.config import LocalLogsConfig
from locallogs.resolver import LogSource, load_log_source, resolve_logs_dir


def test_override_wins(tmp_path):
	(tmp_path / "logs").mkdir()
	custom = tmp_path / "custom"
	custom.mkdir()
	assert resolve_logs_dir(str(custom), cwd=str(tmp_path), system_dirs=()) == str(custom)


def test_relative_override_resolved_against_cwd(tmp_path):
	(tmp_path / "var" / "app").mkdir(parents=True)
	result = resolve_logs_dir("var/app", cwd=str(tmp_path), system_dirs=())
	assert result == os.path.join(str(tmp_path), "var", "app")


def test_missing_override_is_skipped(tmp_path):
	(tmp_path / "logs").mkdir()
	result = resolve_logs_dir(str(tmp_path / "nope"), cwd=str(tmp_path), system_dirs=())
	assert result == str(tmp_path / "logs")


def test_nested_conventions_in_order(tmp_path):
	(tmp_path / "server" / "logs").mkdir(parents=True)
	(tmp_path / "backend" / "logs").mkdir(parents=True)
	assert resolve_logs_dir(cwd=str(tmp_path), system_dirs=()) == str(tmp_path / "server" / "logs")

	(tmp_path / "apps" / "backend" / "logs").mkdir(parents=True)
	assert resolve_logs_dir(cwd=str(tmp_path), system_dirs=()) == str(tmp_path / "apps" / "backend" / "logs")


def test_system_dir_used_last(tmp_path):
	system = tmp_path / "system"
	system.mkdir()
	project = tmp_path / "project"
	project.mkdir()
	assert resolve_logs_dir(cwd=str(project), system_dirs=[str(system)]) == str(system)


def test_files_are_not_directories(tmp_path):
	(tmp_path / "logs").write_text("not a directory")
	result = resolve_logs_dir(cwd=str(tmp_path), system_dirs=())
	assert result == str(tmp_path / "logs")
	assert not os.path.isdir(result)


def test_fallback_does_not_need_to_exist(tmp_path):
	result = resolve_logs_dir(cwd=str(tmp_path), system_dirs=[str(tmp_path / "missing")])
	assert result == os.path.join(str(tmp_path), "logs")
	assert os.path.isabs(result)
	assert not os.path.exists(result)


def test_load_log_source_freezes_config(tmp_path, clean_env, monkeypatch):
	monkeypatch.setenv("LOG_EXTENSIONS", ".out")
	(tmp_path / "logs").mkdir()
	cfg = LocalLogsConfig()
	source = load_log_source(cfg, cwd=str(tmp_path), system_dirs=())
	assert source == LogSource(logs_dir=str(tmp_path / "logs"), extensions=(".out",))
	assert isinstance(source.extensions, tuple)
