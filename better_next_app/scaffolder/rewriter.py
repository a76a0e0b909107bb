"""Literal text rewrites applied to freshly copied template files.

The bundled templates are fully known, so each rewrite targets an exact
substring rather than parsing the file.  If a template drifts, the rspack
rewrite fails loudly and the others become no-ops.
"""

from __future__ import annotations

from pathlib import Path

from better_next_app.config import DEFAULT_IMPORT_ALIAS, TemplateMode
from better_next_app.scaffolder.templates import match_glob

RSPACK_IMPORT = 'import withRspack from "next-rspack";\n\n'
NEXT_CONFIG_EXPORT = "export default nextConfig;"
RSPACK_EXPORT = "export default withRspack(nextConfig);"

CONFIG_OPTIONS_MARKER = "/* config options here */\n"
REACT_COMPILER_OPTION = "  reactCompiler: true,\n"

DEFAULT_PATHS_ENTRY = '"@/*": ["./*"]'
SRC_PATHS_ENTRY = '"@/*": ["./src/*"]'
DEFAULT_ALIAS_KEY = '"@/*":'

# Never touched by the import-alias rewrite.
ALIAS_EXCLUDE_PATTERNS: tuple[str, ...] = (
    "tsconfig.json",
    "jsconfig.json",
    ".git/**/*",
    "**/fonts/**",
    "**/favicon.ico",
)


class ContentNotFoundError(LookupError):
    """Raised when an expected literal is missing from a generated file."""

    def __init__(self, path: Path, expected: str) -> None:
        self.path = path
        self.expected = expected
        super().__init__(f"{path.name}: expected {expected!r} not found")


def next_config_file(mode: TemplateMode) -> str:
    return "next.config.ts" if mode is TemplateMode.TS else "next.config.mjs"


def path_config_file(mode: TemplateMode) -> str:
    return "tsconfig.json" if mode is TemplateMode.TS else "jsconfig.json"


def modify_next_config_for_rspack(root: Path, mode: TemplateMode) -> Path:
    """Wrap the exported Next config with ``withRspack``.

    Raises:
        ContentNotFoundError: If the config has no ``export default nextConfig;``.
    """
    config_path = Path(root) / next_config_file(mode)
    content = config_path.read_text(encoding="utf-8")
    if NEXT_CONFIG_EXPORT not in content:
        raise ContentNotFoundError(config_path, NEXT_CONFIG_EXPORT)

    content = RSPACK_IMPORT + content.replace(NEXT_CONFIG_EXPORT, RSPACK_EXPORT, 1)
    config_path.write_text(content, encoding="utf-8")
    return config_path


def modify_next_config_for_react_compiler(root: Path, mode: TemplateMode) -> Path:
    """Enable ``reactCompiler`` right below the config-options placeholder."""
    config_path = Path(root) / next_config_file(mode)
    content = config_path.read_text(encoding="utf-8")
    content = content.replace(
        CONFIG_OPTIONS_MARKER, CONFIG_OPTIONS_MARKER + REACT_COMPILER_OPTION, 1
    )
    config_path.write_text(content, encoding="utf-8")
    return config_path


def update_config_paths(
    root: Path,
    mode: TemplateMode,
    src_dir: bool,
    import_alias: str,
) -> Path:
    """Point the path alias at ``./src/*`` if needed and rename its key."""
    config_path = Path(root) / path_config_file(mode)
    content = config_path.read_text(encoding="utf-8")

    if src_dir:
        content = content.replace(DEFAULT_PATHS_ENTRY, SRC_PATHS_ENTRY, 1)
    content = content.replace(DEFAULT_ALIAS_KEY, f'"{import_alias}":', 1)

    config_path.write_text(content, encoding="utf-8")
    return config_path


def update_import_aliases(root: Path, import_alias: str) -> list[Path]:
    """Replace every ``@/`` import prefix under *root* with the custom alias.

    Files are handled as bytes so binary assets pass through untouched.  Only
    files whose content changes are rewritten; writing into the existing
    file keeps its permissions.

    Returns:
        The rewritten files.
    """
    root = Path(root)
    replacement = import_alias.removesuffix("*").encode("utf-8")
    changed: list[Path] = []

    for path in sorted(root.rglob("*")):
        if not path.is_file():
            continue
        rel = path.relative_to(root).as_posix()
        if any(match_glob(pattern, rel) for pattern in ALIAS_EXCLUDE_PATTERNS):
            continue

        content = path.read_bytes()
        updated = content.replace(b"@/", replacement)
        if updated != content:
            path.write_bytes(updated)
            changed.append(path)

    return changed


def needs_alias_rewrite(import_alias: str) -> bool:
    return import_alias != DEFAULT_IMPORT_ALIAS
