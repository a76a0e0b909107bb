"""Optional ``src/`` directory layout."""

from __future__ import annotations

from pathlib import Path

from better_next_app.config import TemplateMode, TemplateSelection

# Top-level directories relocated under src/ when present.
SRC_DIR_NAMES: tuple[str, ...] = ("app", "pages", "styles")


def entry_page(selection: TemplateSelection) -> tuple[str, str]:
    """``(directory, stem)`` of the starter page, e.g. ``("app", "page")``."""
    if selection.is_app_router:
        return "app", "page"
    return "pages", "index"


def move_dirs_to_src(root: Path, selection: TemplateSelection) -> Path:
    """Move the app directories under ``src/`` and patch the starter page.

    The starter page tells the user which file to edit; that hint is updated
    from e.g. ``app/page`` to ``src/app/page``.  API-only templates have no
    starter page.

    Moves are not undone if patching fails: an unreadable entry page raises
    after the directories have been relocated.

    Returns:
        The ``src`` directory.
    """
    root = Path(root)
    src = root / "src"
    src.mkdir(parents=True, exist_ok=True)

    for name in SRC_DIR_NAMES:
        old_path = root / name
        if old_path.exists():
            old_path.rename(src / name)

    if selection.is_api:
        return src

    page_dir, page_stem = entry_page(selection)
    ext = "tsx" if selection.mode is TemplateMode.TS else "js"
    page_file = src / page_dir / f"{page_stem}.{ext}"

    content = page_file.read_text(encoding="utf-8")
    old_ref = f"{page_dir}/{page_stem}"
    page_file.write_text(content.replace(old_ref, f"src/{old_ref}", 1), encoding="utf-8")
    return src
