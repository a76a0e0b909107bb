"""Interactive option collection.

Thin wrappers around ``rich.prompt`` that ask the same questions as
create-next-app and return answers as config values.  Every question keeps
its answer validated before it is accepted.
"""

from __future__ import annotations

from rich.prompt import Confirm, Prompt

from better_next_app.config import (
    DEFAULT_IMPORT_ALIAS,
    Linter,
    Preferences,
    ProjectConfig,
)
from better_next_app.utils import console, print_error
from better_next_app.validate.name import validate_import_alias, validate_project_name

SETUP_RECOMMENDED = "recommended"
SETUP_REUSE = "reuse"
SETUP_CUSTOMIZE = "customize"


def ask_project_name(default_name: str = "my-app") -> str:
    """Ask for the project name until a valid one is given."""
    while True:
        name = Prompt.ask("What is your project named?", default=default_name, console=console)
        name = name.strip() or default_name
        problem = validate_project_name(name)
        if problem is None:
            return name
        print_error(f"Invalid project name: {problem}")


def ask_setup_choice(has_saved_prefs: bool) -> str:
    """Ask whether to use the recommended defaults, saved answers, or customise."""
    choices = [SETUP_RECOMMENDED]
    if has_saved_prefs:
        choices.append(SETUP_REUSE)
    choices.append(SETUP_CUSTOMIZE)
    return Prompt.ask(
        "Would you like to use the recommended Next.js defaults?",
        choices=choices,
        default=SETUP_RECOMMENDED,
        console=console,
    )


def ask_import_alias(default: str = DEFAULT_IMPORT_ALIAS) -> str:
    while True:
        alias = Prompt.ask(
            "What import alias would you like configured?", default=default, console=console
        ).strip()
        problem = validate_import_alias(alias)
        if problem is None:
            return alias or DEFAULT_IMPORT_ALIAS
        print_error(problem)


def ask_options(base: ProjectConfig, prefs: Preferences | None = None) -> ProjectConfig:
    """Ask every customisable option, defaulting to *base*'s values."""
    typescript = Confirm.ask(
        "Would you like to use TypeScript?", default=base.typescript, console=console
    )
    linter = Linter(Prompt.ask(
        "Which linter would you like to use?",
        choices=[item.value for item in Linter],
        default=base.linter.value,
        console=console,
    ))
    react_compiler = Confirm.ask(
        "Would you like to use React Compiler?", default=base.react_compiler, console=console
    )
    tailwind = Confirm.ask(
        "Would you like to use Tailwind CSS?", default=base.tailwind, console=console
    )
    src_dir = Confirm.ask(
        "Would you like your code inside a `src/` directory?", default=base.src_dir, console=console
    )

    import_alias = DEFAULT_IMPORT_ALIAS
    customize_default = prefs.customize_alias if prefs else False
    if Confirm.ask(
        f"Would you like to customize the import alias ({DEFAULT_IMPORT_ALIAS} by default)?",
        default=customize_default,
        console=console,
    ):
        import_alias = ask_import_alias(base.import_alias)

    return base.model_copy(update={
        "typescript": typescript,
        "linter": linter,
        "react_compiler": react_compiler,
        "tailwind": tailwind,
        "src_dir": src_dir,
        "import_alias": import_alias,
    })
