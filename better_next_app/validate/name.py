"""npm package-name validation.

Implements the rules npm applies to package names.  Every rule is checked
independently so the caller gets the full list of problems at once; hard
errors and soft warnings are reported separately so the caller can decide
whether a warning blocks progress.

Nothing here raises: results are returned as ``ValidationResult`` values.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional
from urllib.parse import quote

MAX_NAME_LENGTH = 214

# Characters npm rejects outright even though some are URL-safe.
_SPECIAL_CHARS = ("~", ")", "(", "'", "!", "*")

# Node.js core modules and other names npm refuses.
BUILTIN_MODULES: frozenset[str] = frozenset({
    "assert",
    "async_hooks",
    "buffer",
    "child_process",
    "cluster",
    "console",
    "constants",
    "crypto",
    "dgram",
    "diagnostics_channel",
    "dns",
    "domain",
    "events",
    "fs",
    "http",
    "http2",
    "https",
    "inspector",
    "module",
    "net",
    "os",
    "path",
    "perf_hooks",
    "process",
    "punycode",
    "querystring",
    "readline",
    "repl",
    "stream",
    "string_decoder",
    "sys",
    "timers",
    "tls",
    "trace_events",
    "tty",
    "url",
    "util",
    "v8",
    "vm",
    "wasi",
    "worker_threads",
    "zlib",
    "node_modules",
    "favicon.ico",
})


@dataclass
class ValidationResult:
    """Outcome of validating a package name."""

    valid_for_new_packages: bool = True
    valid_for_old_packages: bool = True
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def problems(self) -> list[str]:
        """Errors followed by warnings."""
        return [*self.errors, *self.warnings]

    def _error(self, message: str) -> None:
        self.valid_for_new_packages = False
        self.valid_for_old_packages = False
        if message not in self.errors:
            self.errors.append(message)

    def _warning(self, message: str) -> None:
        self.valid_for_new_packages = False
        self.warnings.append(message)


def validate_npm_package_name(name: str) -> ValidationResult:
    """Validate *name* against npm's package naming rules.

    Examples::

        validate_npm_package_name("my-app").valid_for_new_packages   -> True
        validate_npm_package_name("MyApp").warnings
            -> ["name can no longer contain capital letters"]
        validate_npm_package_name("@scope/").errors
            -> ["package name after scope cannot be empty"]
    """
    result = ValidationResult()

    if not name:
        result._error("name length must be greater than zero")
        return result

    if len(name) > MAX_NAME_LENGTH:
        result._warning(
            f"name can no longer contain more than {MAX_NAME_LENGTH} characters"
        )

    if name.strip() != name:
        result._error("name cannot contain leading or trailing spaces")

    package_name = name
    if name.startswith("@"):
        scope, sep, rest = name.partition("/")
        if not sep:
            result._error("scoped package name must include a package name after the scope")
        else:
            package_name = rest
            if len(scope) <= 1:
                result._error("scope name cannot be empty")
            if not rest:
                result._error("package name after scope cannot be empty")
    elif name.startswith((".", "_")):
        result._error("name cannot start with a period or underscore")

    if any(ch.isupper() for ch in name):
        result._warning("name can no longer contain capital letters")

    if " " in name:
        result._error("name cannot contain spaces")

    if any(ch in name for ch in _SPECIAL_CHARS):
        result._error("name can only contain URL-friendly characters")

    # "@" and "/" are legal in scoped names, so leave them out of the check.
    # Path-segment escaping keeps "$&+:=" as they are.
    unscoped = name.replace("@", "").replace("/", "")
    if quote(unscoped, safe="$&+:=") != unscoped:
        result._error("name can only contain URL-friendly characters")

    if package_name.lower() in BUILTIN_MODULES:
        result._error("name cannot be a core module or reserved name")

    return result


def is_valid_package_name(name: str) -> bool:
    """Return ``True`` if *name* is valid for new packages."""
    return validate_npm_package_name(name).valid_for_new_packages


def validate_project_name(name: str) -> Optional[str]:
    """Validate an interactively entered project name.

    An empty answer is accepted (the default name is used instead).

    Returns:
        The first problem as a message, or ``None`` when the name is usable.
    """
    if not name:
        return None
    result = validate_npm_package_name(name)
    if result.valid_for_new_packages:
        return None
    problems = result.problems
    return problems[0] if problems else "invalid package name"


def validate_import_alias(alias: str) -> Optional[str]:
    """Validate an import alias such as ``@/*`` or ``~/*``.

    Returns:
        An error message, or ``None`` when the alias is usable (empty means
        "use the default").
    """
    if not alias:
        return None
    if not alias.endswith("/*"):
        return "import alias must end with '/*'"
    return None
