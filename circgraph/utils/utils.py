from __future__ import annotations

import hashlib
from pathlib import Path
from typing import Optional, Tuple


def parse_src(src_str: Optional[str]) -> Tuple[Optional[str], Optional[int]]:
    if not src_str:
        return None, None
    try:
        file_part, line_part = src_str.rsplit(":", 1)
        line = int(line_part.split(".")[0])
        return file_part, line
    except ValueError:
        return None, None


def stable_hash(s: str, length: int = 12) -> str:
    return hashlib.sha1(s.encode()).hexdigest()[:length]


def compute_file_hash(filepath: str | Path) -> str:
    """SHA-256 of a file's contents, first 16 hex digits."""
    filepath = Path(filepath)
    if not filepath.exists():
        raise FileNotFoundError(f"File not found: {filepath}")

    sha256 = hashlib.sha256()
    with open(filepath, "rb") as f:
        for chunk in iter(lambda: f.read(8192), b""):
            sha256.update(chunk)
    return sha256.hexdigest()[:16]
