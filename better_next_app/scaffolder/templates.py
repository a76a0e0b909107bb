"""Bundled template access, file selection and copying.

Templates live under ``scaffolder/templates/<family>/<mode>/`` and are treated
as a read-only asset store.  The copier only needs two capabilities from that
store (list a directory, read a file), captured by ``TemplateSource`` so the
install logic can run against an in-memory fake as well as the real tree.
"""

from __future__ import annotations

from fnmatch import fnmatchcase
from pathlib import Path
from typing import NamedTuple, Protocol

from better_next_app.config import InstallRequest, TemplateSelection


# ---------------------------------------------------------------------------
# Template directory discovery
# ---------------------------------------------------------------------------

_DEFAULT_TEMPLATE_DIR = Path(__file__).parent / "templates"

# Files stored under a different name than they are installed as.  A literal
# ``.gitignore`` would be dropped by packaging tools, and a ``README.md`` would
# be mistaken for this package's own readme.
RENAMED_FILES: dict[str, str] = {
    "gitignore": ".gitignore",
    "README-template.md": "README.md",
}


class TemplateEntry(NamedTuple):
    """One directory entry of a template subtree."""

    name: str
    is_dir: bool


class TemplateSource(Protocol):
    """Read-only content provider for template files.

    Paths are POSIX-style and relative to the template root.
    """

    def list_dir(self, path: str) -> list[TemplateEntry]: ...

    def read_bytes(self, path: str) -> bytes: ...


class TemplateStore:
    """Template source backed by a directory on disk.

    Args:
        template_dir: Root holding ``<family>/<mode>/`` subtrees.  Defaults to
            the templates bundled with this package.
    """

    def __init__(self, template_dir: str | Path | None = None) -> None:
        self.template_dir = Path(template_dir) if template_dir else _DEFAULT_TEMPLATE_DIR

    def list_dir(self, path: str) -> list[TemplateEntry]:
        """Return the entries of *path*, sorted by name.

        Raises:
            FileNotFoundError: If *path* does not exist in the store.
        """
        directory = self.template_dir / path
        return [
            TemplateEntry(child.name, child.is_dir())
            for child in sorted(directory.iterdir(), key=lambda p: p.name)
        ]

    def read_bytes(self, path: str) -> bytes:
        return (self.template_dir / path).read_bytes()

    def list_files(self, prefix: str = "") -> list[str]:
        """Return every file path under *prefix*, relative to *prefix*, sorted.

        Introspection helper for inspecting the bundled tree. The install
        pipeline walks templates through ``list_dir`` instead.
        """
        search_dir = self.template_dir / prefix if prefix else self.template_dir
        if not search_dir.is_dir():
            return []
        return sorted(
            p.relative_to(search_dir).as_posix()
            for p in search_dir.rglob("*")
            if p.is_file()
        )


def get_template_file(
    selection: TemplateSelection,
    file: str,
    template_dir: str | Path | None = None,
) -> Path:
    """Path of *file* inside the template subtree for *selection*.

    Introspection helper for locating a bundled file on disk. Installs read
    through a ``TemplateSource`` rather than raw paths.

    E.g. ``get_template_file(TemplateSelection(), "next.config.ts")`` points at
    ``templates/app/ts/next.config.ts``.
    """
    root = Path(template_dir) if template_dir else _DEFAULT_TEMPLATE_DIR
    return root / selection.family.value / selection.mode.value / file


# ---------------------------------------------------------------------------
# File selection
# ---------------------------------------------------------------------------


def match_glob(pattern: str, path: str) -> bool:
    """Match a POSIX *path* against a glob *pattern*.

    ``*`` and ``**`` match any run of characters; a ``**/`` segment may also
    match zero directories, so ``**/favicon.ico`` matches ``favicon.ico``.
    """
    if fnmatchcase(path, pattern):
        return True
    if "**/" in pattern:
        return fnmatchcase(path, pattern.replace("**/", ""))
    return False


def build_copy_patterns(request: InstallRequest) -> list[str]:
    """Include/exclude patterns for one installation.

    Tool config files are excluded when their tool is not selected.
    """
    patterns = ["**"]
    if not request.eslint:
        patterns.append("!eslint.config.mjs")
    if not request.biome:
        patterns.append("!biome.json")
    if not request.tailwind:
        patterns.append("!postcss.config.mjs")
    return patterns


def should_copy_file(filename: str, patterns: list[str]) -> bool:
    """Return ``False`` if any ``!``-prefixed pattern matches *filename*.

    The include side is always the catch-all ``**``, so only exclusions can
    change the outcome and the first matching one wins.
    """
    for pattern in patterns:
        if pattern.startswith("!") and match_glob(pattern[1:], filename):
            return False
    return True


def rename_file(name: str) -> str:
    """Installed name for a template entry called *name*."""
    return RENAMED_FILES.get(name, name)


# ---------------------------------------------------------------------------
# Copying
# ---------------------------------------------------------------------------


def copy_template_files(
    source: TemplateSource,
    template_path: str,
    target_dir: str | Path,
    patterns: list[str],
) -> list[Path]:
    """Mirror the *template_path* subtree of *source* into *target_dir*.

    Directories are created (idempotently) and recursed into; files that pass
    ``should_copy_file`` are read whole and written verbatim under their
    installed name.  The first read or write error propagates; files already
    written are left in place.

    Returns:
        The written file paths, in traversal order.
    """
    target = Path(target_dir)
    target.mkdir(parents=True, exist_ok=True)

    written: list[Path] = []
    for entry in source.list_dir(template_path):
        source_path = f"{template_path}/{entry.name}"
        target_path = target / rename_file(entry.name)

        if entry.is_dir:
            written.extend(copy_template_files(source, source_path, target_path, patterns))
        elif should_copy_file(entry.name, patterns):
            target_path.write_bytes(source.read_bytes(source_path))
            written.append(target_path)

    return written
