# Tests for low-level log file access

import subprocess
from unittest.mock import patch

import pytest

from locallogs.logfiles import reader
from locallogs.logfiles.reader import InvalidLogFileNameError, resolve_log_path, scan_log_files, tail_lines

SAMPLES = [
	"",
	"\n",
	"\n\n",
	"one line no newline",
	"a\nb\nc\n",
	"a\nb\nc",
	"a\n\nb\n\n",
	"windows\r\nline\r\n",
	"\n".join(f"line {i}" for i in range(200)) + "\n",
]


@pytest.mark.parametrize("text", SAMPLES)
@pytest.mark.parametrize("max_lines", [1, 2, 5, 50])
def test_command_and_read_strategies_agree(tmp_path, text, max_lines):
	command = reader.tail_command()
	if not command:
		pytest.skip("no tail binary on this host")
	path = tmp_path / "sample.log"
	path.write_bytes(text.encode("utf-8"))
	assert reader._tail_with_command(command, str(path), max_lines) == reader._tail_with_read(str(path), max_lines)


def test_read_strategy_drops_single_trailing_newline(tmp_path):
	path = tmp_path / "a.log"
	path.write_bytes(b"first\nsecond\nthird\n")
	assert reader._tail_with_read(str(path), 2) == "second\nthird"
	assert reader._tail_with_read(str(path), 10) == "first\nsecond\nthird"


def test_tail_lines_falls_back_when_command_fails(tmp_path):
	path = tmp_path / "a.log"
	path.write_bytes(b"x\ny\nz\n")
	failure = subprocess.CalledProcessError(1, ["tail"])
	with patch("locallogs.logfiles.reader.subprocess.run", side_effect=failure) as run:
		assert tail_lines(str(path), 2, command="/usr/bin/tail") == "y\nz"
	run.assert_called_once()


def test_tail_lines_falls_back_when_command_missing(tmp_path):
	path = tmp_path / "a.log"
	path.write_bytes(b"x\ny\n")
	with patch("locallogs.logfiles.reader.subprocess.run", side_effect=FileNotFoundError("tail")):
		assert tail_lines(str(path), 1, command="/missing/tail") == "y"


def test_tail_lines_without_command_reads_file(tmp_path):
	path = tmp_path / "a.log"
	path.write_bytes(b"x\ny\n")
	with patch("locallogs.logfiles.reader.tail_command", return_value=None), \
			patch("locallogs.logfiles.reader.subprocess.run") as run:
		assert tail_lines(str(path), 5) == "x\ny"
	run.assert_not_called()


def test_tail_lines_zero_is_empty(tmp_path):
	path = tmp_path / "a.log"
	path.write_bytes(b"x\ny\n")
	assert tail_lines(str(path), 0) == ""
	assert tail_lines(str(path), -3) == ""


def test_invalid_utf8_is_replaced(tmp_path):
	path = tmp_path / "a.log"
	path.write_bytes(b"ok\n\xff\xfe broken\n")
	assert reader.read_lines(str(path)) == ["ok", "�� broken", ""]


def test_resolve_log_path_inside_directory(tmp_path):
	assert resolve_log_path(str(tmp_path), "app.log") == str(tmp_path / "app.log")
	assert resolve_log_path(str(tmp_path), "nested/app.log") == str(tmp_path / "nested" / "app.log")


@pytest.mark.parametrize("name", ["../secret.log", "/etc/passwd", "", ".", "nested/../../x.log"])
def test_resolve_log_path_rejects_escapes(tmp_path, name):
	logs = tmp_path / "logs"
	logs.mkdir()
	with pytest.raises(InvalidLogFileNameError):
		resolve_log_path(str(logs), name)


def test_scan_log_files_filters_extensions_and_directories(tmp_path):
	(tmp_path / "app.log").write_text("a")
	(tmp_path / "notes.txt").write_text("b")
	(tmp_path / "data.json").write_text("c")
	(tmp_path / "archive.log").mkdir()
	found = scan_log_files(str(tmp_path), (".log", ".txt"))
	assert sorted(name for name, _, _ in found) == ["app.log", "notes.txt"]
	for name, path, st in found:
		assert path == str(tmp_path / name)
		assert st.st_size == 1
