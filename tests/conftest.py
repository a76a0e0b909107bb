"""Shared pytest fixtures for the better-next-app test suite.

Provides reusable fixtures for:
- An in-memory template source
- Installation requests against a temporary target directory
- Isolated settings (no real config dir, no framework-version override)
- A silenced console
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from better_next_app.config import (
    InstallRequest,
    Settings,
    TemplateFamily,
    TemplateMode,
    TemplateSelection,
)
from better_next_app.scaffolder.templates import TemplateEntry


# ---------------------------------------------------------------------------
# In-memory template source
# ---------------------------------------------------------------------------


class FakeTemplateSource:
    """Template source backed by a ``{posix_path: bytes}`` mapping."""

    def __init__(self, files: dict[str, bytes]) -> None:
        self.files = dict(files)
        self.reads: list[str] = []

    def list_dir(self, path: str) -> list[TemplateEntry]:
        prefix = f"{path}/"
        children: dict[str, bool] = {}
        for file_path in self.files:
            if not file_path.startswith(prefix):
                continue
            head, sep, _rest = file_path[len(prefix):].partition("/")
            children[head] = children.get(head, False) or bool(sep)
        if not children:
            raise FileNotFoundError(path)
        return [TemplateEntry(name, is_dir) for name, is_dir in sorted(children.items())]

    def read_bytes(self, path: str) -> bytes:
        self.reads.append(path)
        try:
            return self.files[path]
        except KeyError:
            raise FileNotFoundError(path) from None


NEXT_CONFIG_TS = (
    'import type { NextConfig } from "next";\n'
    "\n"
    "const nextConfig: NextConfig = {\n"
    "  /* config options here */\n"
    "};\n"
    "\n"
    "export default nextConfig;\n"
)

TSCONFIG_JSON = (
    "{\n"
    '  "compilerOptions": {\n'
    '    "paths": {\n'
    '      "@/*": ["./*"]\n'
    "    }\n"
    "  }\n"
    "}\n"
)


@pytest.fixture
def fake_files() -> dict[str, bytes]:
    """A small ``app/ts`` template tree."""
    return {
        "app/ts/gitignore": b"node_modules\n",
        "app/ts/README-template.md": b"# Starter\n",
        "app/ts/eslint.config.mjs": b"export default [];\n",
        "app/ts/biome.json": b"{}\n",
        "app/ts/postcss.config.mjs": b"export default {};\n",
        "app/ts/next.config.ts": NEXT_CONFIG_TS.encode(),
        "app/ts/tsconfig.json": TSCONFIG_JSON.encode(),
        "app/ts/app/page.tsx": b"Get started by editing app/page.tsx\nimport x from '@/lib/x';\n",
        "app/ts/app/layout.tsx": b"export default function Layout() {}\n",
        "app/ts/app/favicon.ico": b"\x00\x01@/\xff\xfe",
        "app/ts/public/next.svg": b"<svg/>\n",
    }


@pytest.fixture
def fake_source(fake_files: dict[str, bytes]) -> FakeTemplateSource:
    return FakeTemplateSource(fake_files)


@pytest.fixture
def source_factory():
    """Build a ``FakeTemplateSource`` from an arbitrary file mapping."""
    return FakeTemplateSource


# ---------------------------------------------------------------------------
# Requests & settings
# ---------------------------------------------------------------------------


@pytest.fixture
def project_root(tmp_path: Path) -> Path:
    """Target directory for a generated project (not created yet)."""
    return tmp_path / "my-app"


@pytest.fixture
def make_request(project_root: Path):
    """Factory for ``InstallRequest`` objects that never install dependencies."""

    def _make(
        family: TemplateFamily = TemplateFamily.APP,
        mode: TemplateMode = TemplateMode.TS,
        **overrides: Any,
    ) -> InstallRequest:
        fields: dict[str, Any] = {
            "app_name": project_root.name,
            "root": project_root,
            "selection": TemplateSelection(family=family, mode=mode),
            "skip_install": True,
        }
        fields.update(overrides)
        return InstallRequest(**fields)

    return _make


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings pointing at a throwaway config directory."""
    return Settings(config_dir=tmp_path / "config")


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Keep tests independent of the developer's environment."""
    monkeypatch.delenv("NEXT_PRIVATE_TEST_VERSION", raising=False)
    monkeypatch.setenv("BETTER_NEXT_APP_CONFIG_DIR", str(tmp_path / "config"))


@pytest.fixture
def quiet_console(monkeypatch: pytest.MonkeyPatch):
    """Route Rich output to a recording console instead of the terminal."""
    from rich.console import Console

    recorder = Console(record=True, width=120, force_terminal=False)
    for module in (
        "better_next_app.utils",
        "better_next_app.scaffolder.installer",
        "better_next_app.prompt",
        "better_next_app.cli",
    ):
        monkeypatch.setattr(f"{module}.console", recorder)
    return recorder
