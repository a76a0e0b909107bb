"""better-next-app configuration.

Typed configuration for a single scaffolding run. Every choice the user can
make is modelled with Pydantic v2 so it is validated at construction time and
can be persisted to/from JSON without boiler-plate.

Three layers feed a run, lowest priority first:

* ``ProjectConfig.recommended()`` -- the built-in defaults.
* ``Preferences`` -- answers saved from a previous interactive run.
* Explicit command-line flags.

``merge_config`` collapses them into one ``ProjectConfig`` which is then turned
into the immutable ``InstallRequest`` consumed by the scaffolder.
"""

from __future__ import annotations

import os
from enum import Enum
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_IMPORT_ALIAS = "@/*"
DEFAULT_NEXT_VERSION = "latest"

# Environment variable overriding the pinned framework version (used by tests
# and local builds of the framework itself).
NEXT_VERSION_ENV = "NEXT_PRIVATE_TEST_VERSION"
CONFIG_DIR_ENV = "BETTER_NEXT_APP_CONFIG_DIR"


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class TemplateFamily(str, Enum):
    """Starter layout shipped under ``scaffolder/templates/``."""
    APP = "app"
    API = "app-api"
    EMPTY = "app-empty"
    TAILWIND = "app-tw"
    TAILWIND_EMPTY = "app-tw-empty"


class TemplateMode(str, Enum):
    """Source language of a template variant."""
    JS = "js"
    TS = "ts"


class Bundler(str, Enum):
    """Bundler used by the generated project's dev/build scripts."""
    TURBOPACK = "turbopack"
    WEBPACK = "webpack"
    RSPACK = "rspack"


class PackageManager(str, Enum):
    """Package manager that installs the generated project's dependencies."""
    NPM = "npm"
    PNPM = "pnpm"
    YARN = "yarn"
    BUN = "bun"


class Linter(str, Enum):
    """Linter/formatter wired into the generated project."""
    ESLINT = "eslint"
    BIOME = "biome"
    NONE = "none"


# ---------------------------------------------------------------------------
# Installation request
# ---------------------------------------------------------------------------

class TemplateSelection(BaseModel):
    """Which embedded template subtree to install: ``(family, mode)``."""

    model_config = ConfigDict(frozen=True)

    family: TemplateFamily = Field(default=TemplateFamily.APP)
    mode: TemplateMode = Field(default=TemplateMode.TS)

    @property
    def path(self) -> str:
        """Template subtree path relative to the template root, e.g. ``app/ts``."""
        return f"{self.family.value}/{self.mode.value}"

    @property
    def is_api(self) -> bool:
        return self.family is TemplateFamily.API

    @property
    def is_app_router(self) -> bool:
        """All bundled families use the ``app/`` routing convention."""
        return self.family.value.startswith("app")


class InstallRequest(BaseModel):
    """Everything the scaffolder needs to materialise one project.

    Built once by the caller and never mutated by the pipeline; every step
    derives file contents from it.
    """

    model_config = ConfigDict(frozen=True)

    app_name: str = Field(..., description="Package name written to package.json")
    root: Path = Field(..., description="Target directory the project is written to")
    selection: TemplateSelection = Field(default_factory=TemplateSelection)
    package_manager: PackageManager = Field(default=PackageManager.NPM)
    tailwind: bool = Field(default=False, description="Ship Tailwind CSS config and deps")
    linter: Linter = Field(default=Linter.NONE)
    src_dir: bool = Field(default=False, description="Move app code under src/")
    import_alias: str = Field(default=DEFAULT_IMPORT_ALIAS)
    bundler: Bundler = Field(default=Bundler.TURBOPACK)
    react_compiler: bool = Field(default=False)
    skip_install: bool = Field(default=False, description="Do not run the package manager")
    is_online: bool = Field(default=True)

    @property
    def mode(self) -> TemplateMode:
        return self.selection.mode

    @property
    def is_api(self) -> bool:
        return self.selection.is_api

    @property
    def eslint(self) -> bool:
        return self.linter is Linter.ESLINT

    @property
    def biome(self) -> bool:
        return self.linter is Linter.BIOME


# ---------------------------------------------------------------------------
# Resolved project configuration
# ---------------------------------------------------------------------------

class ProjectConfig(BaseModel):
    """The user's fully resolved choices for a new project."""

    project_name: str = Field(default="")
    project_path: Optional[Path] = Field(
        default=None, description="Absolute target path; defaults to ./<project_name>"
    )
    typescript: bool = Field(default=False)
    api_only: bool = Field(default=False, description="API routes only, no React")
    tailwind: bool = Field(default=False)
    linter: Linter = Field(default=Linter.NONE)
    src_dir: bool = Field(default=False)
    import_alias: str = Field(default=DEFAULT_IMPORT_ALIAS)
    empty_template: bool = Field(default=False, description="Minimal starter page")
    bundler: Bundler = Field(default=Bundler.TURBOPACK)
    react_compiler: bool = Field(default=False)
    package_manager: PackageManager = Field(default=PackageManager.NPM)
    skip_install: bool = Field(default=False)
    skip_git: bool = Field(default=False)

    @classmethod
    def recommended(cls) -> "ProjectConfig":
        """The defaults offered as "recommended" by the interactive setup."""
        return cls(
            typescript=True,
            tailwind=True,
            linter=Linter.ESLINT,
            src_dir=False,
            import_alias=DEFAULT_IMPORT_ALIAS,
            bundler=Bundler.TURBOPACK,
            package_manager=PackageManager.NPM,
        )

    @property
    def mode(self) -> TemplateMode:
        return TemplateMode.TS if self.typescript else TemplateMode.JS

    def template_family(self) -> TemplateFamily:
        """Map the styling/minimal/API flags onto a bundled template family."""
        if self.api_only:
            return TemplateFamily.API
        if self.empty_template:
            return TemplateFamily.TAILWIND_EMPTY if self.tailwind else TemplateFamily.EMPTY
        return TemplateFamily.TAILWIND if self.tailwind else TemplateFamily.APP

    def resolved_path(self) -> Path:
        """Absolute target directory for the project."""
        if self.project_path is not None:
            return Path(self.project_path).resolve()
        return (Path.cwd() / self.project_name).resolve()

    def to_request(self, is_online: bool = True) -> InstallRequest:
        """Build the immutable ``InstallRequest`` for the scaffolder."""
        root = self.resolved_path()
        return InstallRequest(
            app_name=root.name,
            root=root,
            selection=TemplateSelection(family=self.template_family(), mode=self.mode),
            package_manager=self.package_manager,
            tailwind=self.tailwind and not self.api_only,
            linter=self.linter,
            src_dir=self.src_dir,
            import_alias=self.import_alias or DEFAULT_IMPORT_ALIAS,
            bundler=self.bundler,
            react_compiler=self.react_compiler,
            skip_install=self.skip_install,
            is_online=is_online,
        )


# ---------------------------------------------------------------------------
# Environment settings
# ---------------------------------------------------------------------------

class Settings(BaseModel):
    """Values read from the process environment."""

    next_version: str = Field(
        default=DEFAULT_NEXT_VERSION,
        description="Version written for next, next-rspack and eslint-config-next",
    )
    config_dir: Path = Field(default_factory=lambda: _default_config_dir())

    @classmethod
    def from_env(cls) -> "Settings":
        """Build ``Settings`` from environment variables.

        Recognised variables (all optional):
            NEXT_PRIVATE_TEST_VERSION, BETTER_NEXT_APP_CONFIG_DIR.
        """
        kwargs: dict[str, Any] = {}
        if os.environ.get(NEXT_VERSION_ENV):
            kwargs["next_version"] = os.environ[NEXT_VERSION_ENV]
        if os.environ.get(CONFIG_DIR_ENV):
            kwargs["config_dir"] = Path(os.environ[CONFIG_DIR_ENV])
        return cls(**kwargs)

    @property
    def preferences_path(self) -> Path:
        return self.config_dir / "preferences.json"


def _default_config_dir() -> Path:
    base = os.environ.get("XDG_CONFIG_HOME")
    root = Path(base) if base else Path.home() / ".config"
    return root / "better-next-app"


# ---------------------------------------------------------------------------
# Saved preferences
# ---------------------------------------------------------------------------

class Preferences(BaseModel):
    """Answers remembered from the last interactive run."""

    model_config = ConfigDict(populate_by_name=True)

    typescript: bool = Field(default=True)
    linter: Linter = Field(default=Linter.ESLINT)
    tailwind: bool = Field(default=True)
    src_dir: bool = Field(default=False, alias="srcDir")
    import_alias: str = Field(default=DEFAULT_IMPORT_ALIAS, alias="importAlias")
    customize_alias: bool = Field(default=False, alias="customizeAlias")
    empty_template: bool = Field(default=False, alias="emptyTemplate")
    disable_git: bool = Field(default=False, alias="disableGit")
    react_compiler: bool = Field(default=False, alias="reactCompiler")

    @classmethod
    def from_config(cls, config: ProjectConfig) -> "Preferences":
        return cls(
            typescript=config.typescript,
            linter=config.linter,
            tailwind=config.tailwind,
            src_dir=config.src_dir,
            import_alias=config.import_alias,
            customize_alias=config.import_alias != DEFAULT_IMPORT_ALIAS,
            empty_template=config.empty_template,
            disable_git=config.skip_git,
            react_compiler=config.react_compiler,
        )

    def save(self, path: Path | None = None) -> Path:
        """Persist the preferences as camelCase JSON.

        Args:
            path: Destination file. Defaults to ``Settings.from_env().preferences_path``.

        Returns:
            The path that was written.
        """
        target = path or Settings.from_env().preferences_path
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(self.model_dump_json(indent=2, by_alias=True), encoding="utf-8")
        return target

    @classmethod
    def load(cls, path: Path | None = None) -> Optional["Preferences"]:
        """Load saved preferences, or ``None`` when nothing was saved yet."""
        source = path or Settings.from_env().preferences_path
        if not source.exists():
            return None
        return cls.model_validate_json(source.read_text(encoding="utf-8"))

    @staticmethod
    def exists(path: Path | None = None) -> bool:
        return (path or Settings.from_env().preferences_path).is_file()

    @staticmethod
    def clear(path: Path | None = None) -> None:
        """Remove the saved preferences file if there is one."""
        (path or Settings.from_env().preferences_path).unlink(missing_ok=True)


def merge_config(
    flags: ProjectConfig | None = None,
    prefs: Preferences | None = None,
) -> ProjectConfig:
    """Apply defaults, then saved preferences, then explicit identity flags.

    Only the project name and path are taken from *flags*; option flags are
    applied by the CLI after merging because it knows which ones were given.
    """
    result = ProjectConfig.recommended()

    if prefs is not None:
        result = result.model_copy(update={
            "typescript": prefs.typescript,
            "linter": prefs.linter,
            "tailwind": prefs.tailwind,
            "src_dir": prefs.src_dir,
            "import_alias": prefs.import_alias,
            "empty_template": prefs.empty_template,
            "skip_git": prefs.disable_git,
            "react_compiler": prefs.react_compiler,
        })

    if flags is not None:
        update: dict[str, Any] = {}
        if flags.project_name:
            update["project_name"] = flags.project_name
        if flags.project_path is not None:
            update["project_path"] = flags.project_path
        result = result.model_copy(update=update)

    return result
