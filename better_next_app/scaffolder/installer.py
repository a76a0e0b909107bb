"""Template installation pipeline.

Turns an ``InstallRequest`` into a ready-to-run Next.js project directory:

1. Copy the selected template subtree (minus deselected tool configs).
2. Wrap the Next config for rspack, if chosen.
3. Enable the React Compiler in the Next config, if chosen.
4. Update the path alias in ``tsconfig.json`` / ``jsconfig.json``.
5. Rewrite ``@/`` imports across the tree for a custom alias.
6. Move app directories under ``src/``, if chosen.
7. Write ``package.json`` (and package-manager side files).
8. Install dependencies with the chosen package manager.

Steps run strictly one after another.  The first failure aborts the run and
is re-raised as ``TemplateInstallError``; nothing already written is rolled
back, and the target directory is not re-checked (see ``better_next_app.validate``).
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any, Callable

from better_next_app.config import Bundler, InstallRequest, PackageManager, Settings
from better_next_app.scaffolder.layout import move_dirs_to_src
from better_next_app.scaffolder.manifest import write_package_json
from better_next_app.scaffolder.rewriter import (
    modify_next_config_for_react_compiler,
    modify_next_config_for_rspack,
    needs_alias_rewrite,
    update_config_paths,
    update_import_aliases,
)
from better_next_app.scaffolder.templates import (
    TemplateSource,
    TemplateStore,
    build_copy_patterns,
    copy_template_files,
)
from better_next_app.utils import (
    CommandError,
    console,
    create_progress,
    print_list,
    run_command,
)


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class TemplateInstallError(Exception):
    """Raised when a pipeline step fails; names the step that failed."""

    def __init__(self, step: str, message: str) -> None:
        self.step = step
        super().__init__(f"failed to {step}: {message}")


# ---------------------------------------------------------------------------
# Dependency installation
# ---------------------------------------------------------------------------


def install_command(package_manager: PackageManager, is_online: bool = True) -> list[str]:
    """The install command line for *package_manager*."""
    cmd = [package_manager.value, "install"]
    if not is_online and package_manager in (PackageManager.PNPM, PackageManager.YARN):
        cmd.append("--offline")
    return cmd


async def install_dependencies(
    package_manager: PackageManager,
    root: str | Path,
    is_online: bool = True,
    timeout: int = 900,
) -> None:
    """Run the package manager's install command inside *root*.

    Raises:
        CommandError: If the command exits non-zero or times out.
    """
    cmd = install_command(package_manager, is_online)
    returncode, _stdout, stderr = await run_command(
        cmd,
        cwd=root,
        timeout=timeout,
        env={"ADBLOCK": "1", "NODE_ENV": "development", "DISABLE_OPENCOLLECTIVE": "1"},
    )
    if returncode != 0:
        raise CommandError(cmd, returncode, stderr)


# ---------------------------------------------------------------------------
# Pipeline
# ---------------------------------------------------------------------------


class TemplateInstaller:
    """Runs the installation steps for one ``InstallRequest``.

    Attributes:
        request: The immutable installation request.
        store: Where template files are read from.
        settings: Environment-derived settings (framework version override).
        written_files: Files materialised by the copy step.
        package_json: The manifest written by the manifest step.
    """

    def __init__(
        self,
        request: InstallRequest,
        store: TemplateSource | None = None,
        settings: Settings | None = None,
    ) -> None:
        self.request = request
        self.store = store or TemplateStore()
        self.settings = settings or Settings.from_env()
        self.written_files: list[Path] = []
        self.package_json: dict[str, Any] = {}

    # -- Public API --------------------------------------------------------

    async def install(self) -> Path:
        """Install the template into ``request.root``.

        Returns:
            The project root.

        Raises:
            TemplateInstallError: On the first failing step.
        """
        req = self.request
        root = Path(req.root)

        console.print(f"\nInitializing project with template: [cyan]{req.selection.family.value}[/cyan]\n")

        # 1. Copy template files
        patterns = build_copy_patterns(req)
        self.written_files = await self._step(
            "copy template files",
            copy_template_files, self.store, req.selection.path, root, patterns,
        )

        # 2. Bundler wrapper
        if req.bundler is Bundler.RSPACK:
            await self._step(
                "modify next.config for Rspack",
                modify_next_config_for_rspack, root, req.mode,
            )

        # 3. Compiler flag
        if req.react_compiler:
            await self._step(
                "modify next.config for React Compiler",
                modify_next_config_for_react_compiler, root, req.mode,
            )

        # 4. Path alias config
        await self._step(
            "update config paths",
            update_config_paths, root, req.mode, req.src_dir, req.import_alias,
        )

        # 5. Import aliases across the tree
        if needs_alias_rewrite(req.import_alias):
            await self._step(
                "update import aliases",
                update_import_aliases, root, req.import_alias,
            )

        # 6. src/ layout
        if req.src_dir:
            await self._step(
                "move directories to src",
                move_dirs_to_src, root, req.selection,
            )

        # 7. Manifest
        self.package_json = await self._step(
            "generate package.json",
            write_package_json, req, self.settings.next_version,
        )

        # 8. Dependencies
        if not req.skip_install:
            await self._install_dependencies()

        return root

    # -- Internals ---------------------------------------------------------

    async def _step(self, name: str, func: Callable[..., Any], *args: Any) -> Any:
        """Run one blocking step in a worker thread, wrapping its failure."""
        try:
            return await asyncio.to_thread(func, *args)
        except (OSError, LookupError, ValueError) as exc:
            raise TemplateInstallError(name, str(exc)) from exc

    async def _install_dependencies(self) -> None:
        req = self.request
        print_list("Installing dependencies:", list(self.package_json.get("dependencies", {})))
        dev_deps = self.package_json.get("devDependencies", {})
        if dev_deps:
            print_list("Installing devDependencies:", list(dev_deps))
        console.print()

        with create_progress() as progress:
            progress.add_task(f"{req.package_manager.value} install", total=None)
            try:
                await install_dependencies(req.package_manager, req.root, req.is_online)
            except CommandError as exc:
                raise TemplateInstallError("install dependencies", str(exc)) from exc


async def install_template(
    request: InstallRequest,
    store: TemplateSource | None = None,
    settings: Settings | None = None,
) -> Path:
    """Install *request* and return the project root.

    Convenience wrapper around ``TemplateInstaller(...).install()``.
    """
    return await TemplateInstaller(request, store, settings).install()
