"""better-next-app command line.

Usage::

    better-next-app my-app
    better-next-app my-app --js --no-tailwind --biome --use-pnpm
    better-next-app my-app --api --src-dir --import-alias "~/*" --yes
    python -m better_next_app --reset-preferences
"""

from __future__ import annotations

import argparse
import asyncio
import shutil
import sys
import time
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError
from rich.panel import Panel

from better_next_app.config import (
    Bundler,
    Linter,
    PackageManager,
    Preferences,
    ProjectConfig,
    Settings,
    merge_config,
)
from better_next_app.prompt import (
    SETUP_CUSTOMIZE,
    SETUP_RECOMMENDED,
    ask_options,
    ask_project_name,
    ask_setup_choice,
)
from better_next_app.scaffolder import TemplateInstallError, install_template
from better_next_app.utils import (
    CommandError,
    console,
    format_duration,
    print_error,
    print_step,
    print_success,
    print_summary_table,
    print_warning,
    run_command,
)
from better_next_app.validate import (
    DirectoryError,
    ensure_directory,
    is_ci,
    is_folder_empty,
    is_online,
    validate_directory,
    validate_npm_package_name,
)

# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class CreateAppError(Exception):
    """Raised when the project cannot be created with the given choices."""


# Option flags that, when any is given, skip the "recommended defaults" question.
_OPTION_DESTS = (
    "typescript",
    "tailwind",
    "linter",
    "src_dir",
    "import_alias",
    "api_only",
    "empty_template",
    "bundler",
    "react_compiler",
)


# ---------------------------------------------------------------------------
# Argument parsing
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="better-next-app",
        description="Scaffold a new Next.js project from bundled templates",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  better-next-app my-app\n"
            "  better-next-app my-app --js --no-tailwind --biome\n"
            "  better-next-app my-api --api --use-pnpm --yes\n"
        ),
    )
    parser.add_argument("directory", nargs="?", default=None, help="Project directory")

    lang = parser.add_mutually_exclusive_group()
    lang.add_argument("--ts", "--typescript", dest="typescript", action="store_const", const=True,
                      help="Initialize as a TypeScript project")
    lang.add_argument("--js", "--javascript", dest="typescript", action="store_const", const=False,
                      help="Initialize as a JavaScript project")

    style = parser.add_mutually_exclusive_group()
    style.add_argument("--tailwind", dest="tailwind", action="store_const", const=True,
                       help="Initialize with Tailwind CSS config")
    style.add_argument("--no-tailwind", dest="tailwind", action="store_const", const=False)

    lint = parser.add_mutually_exclusive_group()
    lint.add_argument("--eslint", dest="linter", action="store_const", const=Linter.ESLINT,
                      help="Initialize with ESLint config")
    lint.add_argument("--biome", dest="linter", action="store_const", const=Linter.BIOME,
                      help="Initialize with Biome config")
    lint.add_argument("--no-linter", dest="linter", action="store_const", const=Linter.NONE)

    parser.add_argument("--src-dir", dest="src_dir", action="store_const", const=True,
                        help="Initialize inside a `src/` directory")
    parser.add_argument("--import-alias", dest="import_alias", default=None,
                        help='Import alias to use (default: "@/*")')
    parser.add_argument("--api", dest="api_only", action="store_const", const=True,
                        help="Initialize a headless API-only project")
    parser.add_argument("--empty", dest="empty_template", action="store_const", const=True,
                        help="Initialize an empty project")

    bundler = parser.add_mutually_exclusive_group()
    for choice in Bundler:
        bundler.add_argument(f"--{choice.value}", dest="bundler", action="store_const", const=choice,
                             help=f"Use {choice.value} as the bundler")

    parser.add_argument("--react-compiler", dest="react_compiler", action="store_const", const=True,
                        help="Enable the React Compiler")

    pm = parser.add_mutually_exclusive_group()
    for choice in PackageManager:
        pm.add_argument(f"--use-{choice.value}", dest="package_manager", action="store_const",
                        const=choice, help=f"Bootstrap the app using {choice.value}")

    parser.add_argument("--skip-install", action="store_true",
                        help="Do not install dependencies")
    parser.add_argument("--disable-git", action="store_true",
                        help="Skip initializing a git repository")
    parser.add_argument("--yes", "-y", action="store_true",
                        help="Use saved preferences or defaults for unprovided options")
    parser.add_argument("--reset-preferences", action="store_true",
                        help="Forget saved preferences and exit")
    return parser


def apply_flags(config: ProjectConfig, args: argparse.Namespace) -> ProjectConfig:
    """Overlay every option explicitly given on the command line."""
    update: dict[str, Any] = {
        dest: getattr(args, dest)
        for dest in (*_OPTION_DESTS, "package_manager")
        if getattr(args, dest, None) is not None
    }
    if args.skip_install:
        update["skip_install"] = True
    if args.disable_git:
        update["skip_git"] = True
    return config.model_copy(update=update)


def _has_option_flags(args: argparse.Namespace) -> bool:
    return any(getattr(args, dest, None) is not None for dest in _OPTION_DESTS)


def resolve_config(
    args: argparse.Namespace,
    settings: Settings,
    interactive: bool,
) -> ProjectConfig:
    """Combine defaults, saved preferences, prompts and flags into one config."""
    try:
        prefs = Preferences.load(settings.preferences_path)
    except ValidationError:
        print_warning(
            f"Ignoring unreadable preferences file {settings.preferences_path}. "
            "Run with --reset-preferences to remove it."
        )
        prefs = None
    config = merge_config(ProjectConfig(project_name=args.directory or ""), prefs)

    if not config.project_name:
        if not interactive:
            raise CreateAppError("Please specify the project directory")
        config = config.model_copy(update={"project_name": ask_project_name()})

    if interactive and not _has_option_flags(args):
        choice = ask_setup_choice(prefs is not None)
        if choice == SETUP_RECOMMENDED:
            config = ProjectConfig.recommended().model_copy(
                update={"project_name": config.project_name}
            )
        elif choice == SETUP_CUSTOMIZE:
            config = ask_options(config, prefs)
            Preferences.from_config(config).save(settings.preferences_path)

    return apply_flags(config, args)


# ---------------------------------------------------------------------------
# Project creation
# ---------------------------------------------------------------------------


async def try_git_init(root: Path) -> bool:
    """Initialise a git repository with an initial commit, best effort.

    Returns:
        ``True`` if the repository was created.
    """
    if shutil.which("git") is None or (root / ".git").exists():
        return False
    try:
        for cmd in (
            ["git", "init"],
            ["git", "checkout", "-b", "main"],
            ["git", "add", "-A"],
            ["git", "commit", "-m", "Initial commit from better-next-app"],
        ):
            returncode, _stdout, stderr = await run_command(cmd, cwd=root, timeout=60)
            if returncode != 0:
                raise CommandError(cmd, returncode, stderr)
    except CommandError as exc:
        print_warning(f"Could not initialize a git repository: {exc}")
        shutil.rmtree(root / ".git", ignore_errors=True)
        return False
    return True


async def create_app(config: ProjectConfig, settings: Settings | None = None) -> Path:
    """Validate the target and install the template for *config*.

    Raises:
        CreateAppError: If the name is invalid or the directory has conflicts.
        DirectoryError: If the target is not a writable directory.
        TemplateInstallError: If a pipeline step fails.
    """
    settings = settings or Settings.from_env()
    root = config.resolved_path()

    result = validate_npm_package_name(root.name)
    if not result.valid_for_new_packages:
        problems = "\n".join(f"  - {p}" for p in result.problems)
        raise CreateAppError(
            f'Could not create a project called "{root.name}" '
            f"because of npm naming restrictions:\n{problems}"
        )

    validate_directory(root)
    ensure_directory(root)

    empty, conflicting = is_folder_empty(root)
    if not empty:
        listing = "\n".join(f"  {name}" for name in conflicting)
        raise CreateAppError(
            f"The directory {root.name} contains files that could conflict:\n{listing}\n"
            "Either try using a new directory name, or remove the files listed above."
        )

    online = True
    if not config.skip_install:
        online = await is_online()
        if not online:
            print_warning("You appear to be offline. Falling back to the local cache.")

    request = config.to_request(is_online=online)
    print_summary_table(
        {
            "Template": request.selection.path,
            "Package manager": request.package_manager.value,
            "Linter": request.linter.value,
            "Bundler": request.bundler.value,
            "Import alias": request.import_alias,
            "src/ directory": "yes" if request.src_dir else "no",
        },
        title=f"Creating {request.app_name}",
    )

    await install_template(request, settings=settings)

    if not config.skip_git:
        if await try_git_init(root):
            console.print("Initialized a git repository.")

    return root


def main(argv: Optional[list[str]] = None) -> None:
    """CLI entry point for ``better-next-app`` / ``python -m better_next_app``."""
    args = build_parser().parse_args(argv)
    settings = Settings.from_env()

    if args.reset_preferences:
        Preferences.clear(settings.preferences_path)
        print_success("Preferences reset successfully.")
        return

    interactive = not args.yes and sys.stdin.isatty() and not is_ci()
    start = time.monotonic()

    try:
        config = resolve_config(args, settings, interactive)
        print_step(f"Creating a new Next.js app in {config.resolved_path()}")
        root = asyncio.run(create_app(config, settings))
    except (CreateAppError, DirectoryError, TemplateInstallError) as exc:
        print_error(f"Error: {exc}")
        sys.exit(1)
    except KeyboardInterrupt:
        print_error("Aborted.")
        sys.exit(1)

    pm = config.package_manager.value
    run = "npm run" if pm == "npm" else pm
    console.print(
        Panel(
            f"[bold green]Success![/bold green] Created {root.name} at {root} "
            f"in {format_duration(time.monotonic() - start)}\n\n"
            f"  cd {root.name}\n  {run} dev",
            style="green",
        )
    )
