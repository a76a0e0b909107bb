"""``package.json`` synthesis for the generated project.

The manifest is assembled in memory from the ``InstallRequest`` and written
in one go.  Versions are fixed constants (plus the framework version, which
may be overridden from the environment); nothing is resolved against the
registry.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from better_next_app.config import (
    DEFAULT_NEXT_VERSION,
    Bundler,
    InstallRequest,
    PackageManager,
    TemplateMode,
)

# React version paired with the framework release these templates target.
NEXTJS_REACT_PEER_VERSION = "19.2.3"

PROJECT_VERSION = "0.1.0"

REACT_COMPILER_VERSION = "1.0.0"
BIOME_VERSION = "2.2.0"

TYPESCRIPT_DEV_DEPENDENCIES: dict[str, str] = {
    "typescript": "^5",
    "@types/node": "^20",
    "@types/react": "^19",
    "@types/react-dom": "^19",
}

TAILWIND_DEV_DEPENDENCIES: dict[str, str] = {
    "@tailwindcss/postcss": "^4",
    "tailwindcss": "^4",
}

# Native-build packages that need no install scripts.
NATIVE_BUILD_PACKAGES: list[str] = ["sharp", "unrs-resolver"]

PNPM_WORKSPACE_FILE = "pnpm-workspace.yaml"
PNPM_WORKSPACE_YAML = (
    "packages:\n"
    "  - .\n"
    "ignoredBuiltDependencies:\n"
    "  - sharp\n"
    "  - unrs-resolver\n"
)

PACKAGE_JSON_FILE = "package.json"


def _sorted(mapping: dict[str, str]) -> dict[str, str]:
    return {key: mapping[key] for key in sorted(mapping)}


def _rspack_version(version: str) -> str:
    """``next-rspack`` follows ``next``, except for a local tarball build."""
    override = Path(version)
    if override.is_absolute():
        return str((override.parent / ".." / "next-rspack" / "next-rspack-packed.tgz").resolve())
    return version


def build_package_json(
    request: InstallRequest,
    version: str = DEFAULT_NEXT_VERSION,
) -> dict[str, Any]:
    """Build the manifest for *request*.

    Args:
        request: The installation being performed.
        version: Version used for ``next``, ``next-rspack`` and
            ``eslint-config-next``.

    Returns:
        The manifest as an ordered dict ready for ``serialize_package_json``.
    """
    bundler_flags = " --webpack" if request.bundler is Bundler.WEBPACK else ""

    scripts: dict[str, str] = {
        "dev": f"next dev{bundler_flags}",
        "build": f"next build{bundler_flags}",
        "start": "next start",
    }
    if request.eslint:
        scripts["lint"] = "eslint"
    if request.biome:
        scripts["lint"] = "biome check"
        scripts["format"] = "biome format --write"

    dependencies: dict[str, str] = {
        "react": NEXTJS_REACT_PEER_VERSION,
        "react-dom": NEXTJS_REACT_PEER_VERSION,
        "next": version,
    }
    dev_dependencies: dict[str, str] = {}

    # rspack is wired in through next.config, so it adds a dependency but no flag.
    if request.bundler is Bundler.RSPACK:
        dependencies["next-rspack"] = _rspack_version(version)

    if request.react_compiler:
        dev_dependencies["babel-plugin-react-compiler"] = REACT_COMPILER_VERSION

    if request.mode is TemplateMode.TS:
        dev_dependencies.update(TYPESCRIPT_DEV_DEPENDENCIES)

    if request.tailwind:
        dev_dependencies.update(TAILWIND_DEV_DEPENDENCIES)

    if request.eslint:
        dev_dependencies["eslint"] = "^9"
        dev_dependencies["eslint-config-next"] = version

    if request.biome:
        dev_dependencies["@biomejs/biome"] = BIOME_VERSION

    if request.is_api:
        dependencies.pop("react", None)
        dependencies.pop("react-dom", None)
        # @types/react stays: generated route types still reference it.
        dev_dependencies.pop("@types/react-dom", None)
        scripts.pop("lint", None)
        scripts.pop("format", None)

    package_json: dict[str, Any] = {
        "name": request.app_name,
        "version": PROJECT_VERSION,
        "private": True,
        "scripts": scripts,
        "dependencies": _sorted(dependencies),
    }
    if dev_dependencies:
        package_json["devDependencies"] = _sorted(dev_dependencies)

    if request.package_manager is PackageManager.BUN:
        package_json["ignoreScripts"] = list(NATIVE_BUILD_PACKAGES)
        package_json["trustedDependencies"] = list(NATIVE_BUILD_PACKAGES)

    return package_json


def serialize_package_json(package_json: dict[str, Any]) -> str:
    """Two-space indented JSON with a trailing newline."""
    return json.dumps(package_json, indent=2, ensure_ascii=False) + "\n"


def write_package_json(
    request: InstallRequest,
    version: str = DEFAULT_NEXT_VERSION,
) -> dict[str, Any]:
    """Write ``package.json`` (and ``pnpm-workspace.yaml`` for pnpm) to the root.

    Returns:
        The manifest that was written.
    """
    root = Path(request.root)
    package_json = build_package_json(request, version)

    if request.package_manager is PackageManager.PNPM:
        (root / PNPM_WORKSPACE_FILE).write_text(PNPM_WORKSPACE_YAML, encoding="utf-8")

    (root / PACKAGE_JSON_FILE).write_text(
        serialize_package_json(package_json), encoding="utf-8"
    )
    return package_json
