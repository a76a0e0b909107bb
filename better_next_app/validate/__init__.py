"""Pre-installation checks: package names, target directories, environment.

These run before the scaffolder touches the file system; the scaffolder
itself assumes they have passed and does not repeat them.
"""

from better_next_app.validate.directory import (
    ALLOWED_FILES,
    DirectoryError,
    ensure_directory,
    is_folder_empty,
    validate_directory,
)
from better_next_app.validate.environment import is_ci, is_online
from better_next_app.validate.name import (
    ValidationResult,
    is_valid_package_name,
    validate_import_alias,
    validate_npm_package_name,
    validate_project_name,
)

__all__ = [
    "ALLOWED_FILES",
    "DirectoryError",
    "ValidationResult",
    "ensure_directory",
    "is_ci",
    "is_folder_empty",
    "is_online",
    "is_valid_package_name",
    "validate_directory",
    "validate_import_alias",
    "validate_npm_package_name",
    "validate_project_name",
]
