"""
Fix Applicator — Replaces exactly one line of a document on disk.

The whole text of the target line is replaced; every other line, including
its line ending, stays byte-identical. The read-validate-write sequence runs
under a per-file lock and the write goes through a temp file + rename, so a
failed apply leaves the document untouched.
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path

from vulnlens.models.suggestion_models import FixResult
from vulnlens.utils.atomic_io import atomic_write_text
from vulnlens.utils.workspace import OutsideWorkspaceError, resolve_in_workspace

logger = logging.getLogger("vulnlens.engine.fix_applicator")


def replace_line(source: str, line_number: int, new_text: str) -> str | None:
    """
    Replace one line's text in a source string.

    Args:
        source: Original full document text
        line_number: 1-indexed line to replace
        new_text: Replacement text for that line

    Returns:
        New document text, or None if the line does not exist
    """
    lines = source.split("\n")
    if line_number < 1 or line_number > len(lines):
        logger.error(
            f"Invalid line {line_number} (document has {len(lines)} lines)"
        )
        return None

    index = line_number - 1
    ending = "\r" if lines[index].endswith("\r") else ""
    if ending:
        # Multi-line replacements take the target line's CRLF ending throughout
        new_text = new_text.replace("\r\n", "\n").replace("\n", "\r\n")
    lines[index] = new_text + ending
    return "\n".join(lines)


class FixApplicator:
    """Applies single-line replacements to files, one writer per file at a time."""

    def __init__(self, workspace_root: str | Path | None = None) -> None:
        self.workspace_root = workspace_root
        self._file_locks: dict[str, threading.Lock] = {}
        self._guard = threading.Lock()

    def _lock_for(self, path: Path) -> threading.Lock:
        key = str(path.resolve())
        with self._guard:
            lock = self._file_locks.get(key)
            if lock is None:
                lock = self._file_locks[key] = threading.Lock()
            return lock

    def apply(
        self,
        file_name: str,
        line_number: int,
        new_text: str,
        expected_line_count: int | None = None,
        expected_line: str | None = None,
    ) -> FixResult:
        """
        Replace the text of line `line_number` in `file_name` with `new_text`.

        Args:
            expected_line_count: Line count seen when the fix was generated;
                a different count means the document changed and the apply fails.
            expected_line: Text the target line had when the fix was generated.

        Returns:
            FixResult; success is False and the file is unchanged on any failure.
        """
        def failed(status: str, message: str) -> FixResult:
            logger.error(f"Fix not applied to {file_name}:{line_number}: {message}")
            return FixResult(
                success=False,
                status=status,
                fileName=file_name,
                lineNumber=line_number,
                message=message,
            )

        if not file_name:
            return failed("file_missing", "No target file")

        if self.workspace_root is None:
            path = Path(file_name)
        else:
            try:
                path = resolve_in_workspace(file_name, self.workspace_root)
            except OutsideWorkspaceError as e:
                return failed("outside_workspace", str(e))

        with self._lock_for(path):
            if not path.is_file():
                return failed("file_missing", f"File not found: {file_name}")

            try:
                with open(path, encoding="utf-8", newline="") as f:
                    source = f.read()
            except (OSError, UnicodeDecodeError) as e:
                return failed("write_failed", f"Could not read document: {e}")

            lines = source.split("\n")
            if line_number < 1 or line_number > len(lines):
                return failed(
                    "line_out_of_range",
                    f"Line {line_number} out of range (document has {len(lines)} lines)",
                )
            if expected_line_count is not None and expected_line_count != len(lines):
                return failed(
                    "stale_document",
                    f"Document changed since scan ({expected_line_count} -> {len(lines)} lines)",
                )
            if expected_line is not None and lines[line_number - 1].rstrip("\r") != expected_line:
                return failed("stale_document", f"Line {line_number} changed since scan")

            patched = replace_line(source, line_number, new_text)
            if patched is None:
                return failed("line_out_of_range", f"Line {line_number} out of range")

            try:
                atomic_write_text(path, patched)
            except OSError as e:
                return failed("write_failed", f"Write rejected: {e}")

        logger.info(f"Applied fix to {file_name}:{line_number}")
        return FixResult(
            success=True,
            status="applied",
            fileName=file_name,
            lineNumber=line_number,
            message=f"Fix applied to line {line_number}",
        )
