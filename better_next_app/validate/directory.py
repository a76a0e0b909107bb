"""Target-directory prechecks.

Run before any template file is written: the target must either not exist
yet, or be a writable directory holding nothing but a few harmless files.
"""

from __future__ import annotations

from pathlib import Path

# Entries that may already exist in an otherwise "empty" target directory.
ALLOWED_FILES: frozenset[str] = frozenset({
    ".git",
    ".gitignore",
    ".gitkeep",
    "LICENSE",
    "license",
    "README.md",
    "readme.md",
})

_WRITE_PROBE = ".write-test"


class DirectoryError(Exception):
    """Raised when a path cannot be used as an installation target."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"{path}: {reason}")


def validate_directory(path: str | Path) -> None:
    """Check that *path* is usable as a project target.

    A missing path is fine (it is created later).  An existing path must be
    a directory in which a probe file can be created.

    Raises:
        DirectoryError: If the path is not a directory or is not writable.
    """
    target = Path(path).resolve()
    if not target.exists():
        return

    if not target.is_dir():
        raise DirectoryError(target, "path exists but is not a directory")

    probe = target / _WRITE_PROBE
    try:
        probe.touch()
    except OSError as exc:
        raise DirectoryError(target, "directory is not writable") from exc
    probe.unlink(missing_ok=True)


def is_folder_empty(path: str | Path) -> tuple[bool, list[str]]:
    """Report whether *path* holds only allowlisted entries.

    Returns:
        ``(is_empty, conflicting)`` where *conflicting* lists the names of the
        entries outside ``ALLOWED_FILES``, sorted.  A missing directory is
        empty.
    """
    target = Path(path)
    if not target.exists():
        return True, []

    conflicting = sorted(
        entry.name for entry in target.iterdir() if entry.name not in ALLOWED_FILES
    )
    return not conflicting, conflicting


def ensure_directory(path: str | Path) -> Path:
    """Create *path* (and parents) and return it resolved.

    Raises:
        DirectoryError: If the directory cannot be created.
    """
    target = Path(path)
    try:
        target.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise DirectoryError(target, f"could not create directory ({exc.strerror or exc})") from exc
    return target.resolve()
