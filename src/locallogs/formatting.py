# Display helpers for sizes and timestamps

import re
from datetime import datetime, timezone
from typing import Optional

SIZE_UNITS = ("Bytes", "KB", "MB", "GB")

_TIMESTAMP_RE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2} [0-9]{2}:[0-9]{2}:[0-9]{2}")


def format_bytes(size: int) -> str:
	"""Human readable size in 1024-based units, e.g. 1536 -> '1.5 KB'."""
	if size == 0:
		return "0 Bytes"
	value = float(size)
	unit = 0
	while value >= 1024 and unit < len(SIZE_UNITS) - 1:
		value /= 1024
		unit += 1
	text = f"{value:.2f}".rstrip("0").rstrip(".")
	return f"{text} {SIZE_UNITS[unit]}"


def format_mtime(mtime: float) -> str:
	"""ISO-8601 UTC with millisecond precision and a Z suffix."""
	stamp = datetime.fromtimestamp(mtime, tz=timezone.utc)
	return stamp.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def extract_timestamp(line: str) -> Optional[str]:
	match = _TIMESTAMP_RE.search(line)
	return match.group(0) if match else None
