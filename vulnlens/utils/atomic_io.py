"""
Atomic I/O utilities.
"""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any


def atomic_write_text(path: Path | str, text: str, encoding: str = "utf-8") -> None:
    """
    Write text so the target is either fully replaced or left untouched.

    1. Write to a temp file in the target's directory.
    2. fsync the temp file.
    3. Atomically rename it over the target.

    Raises:
        OSError: If any file operation fails. The temp file is removed.
    """
    path = Path(path)
    parent = path.parent
    parent.mkdir(parents=True, exist_ok=True)

    temp_path = None
    try:
        # newline="" keeps the caller's line endings byte-for-byte
        with tempfile.NamedTemporaryFile(
            mode="w", dir=str(parent), delete=False, encoding=encoding, newline=""
        ) as tf:
            temp_path = Path(tf.name)
            tf.write(text)
            tf.flush()
            os.fsync(tf.fileno())

        if path.exists():
            os.chmod(temp_path, path.stat().st_mode & 0o777)
        os.replace(temp_path, path)
    except Exception:
        if temp_path and temp_path.exists():
            temp_path.unlink(missing_ok=True)
        raise


def atomic_write_json(path: Path | str, data: Any) -> None:
    """Atomically write pretty-printed JSON."""
    atomic_write_text(path, json.dumps(data, indent=2, ensure_ascii=False) + "\n")
