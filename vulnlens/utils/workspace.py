"""
Workspace confinement for file paths supplied by API clients.
"""

from __future__ import annotations

from pathlib import Path

from vulnlens.config import settings


class OutsideWorkspaceError(PermissionError):
    """Raised when a path resolves outside the configured workspace root."""


def resolve_in_workspace(path: str | Path, root: str | Path | None = None) -> Path:
    """
    Resolve a path against the workspace root, following symlinks.

    Relative paths are taken relative to the root, not the process cwd.

    Raises:
        OutsideWorkspaceError: If the resolved path escapes the root.
    """
    base = Path(root if root is not None else settings.workspace_root).resolve()
    candidate = Path(path)
    if not candidate.is_absolute():
        candidate = base / candidate

    resolved = candidate.resolve()
    if not resolved.is_relative_to(base):
        raise OutsideWorkspaceError(f"Path is outside the workspace: {path}")
    return resolved
