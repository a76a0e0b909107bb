"""Unit tests for package-name validation (better_next_app.validate.name).

Tests cover:
- Names npm accepts (plain, dotted, scoped)
- Hard errors (empty, spaces, URL-unsafe characters, reserved names)
- Soft warnings (capital letters, excessive length)
- Scoped-name structure
- validate_project_name / validate_import_alias helpers
"""

from __future__ import annotations

import pytest

from better_next_app.validate.name import (
    BUILTIN_MODULES,
    MAX_NAME_LENGTH,
    ValidationResult,
    is_valid_package_name,
    validate_import_alias,
    validate_npm_package_name,
    validate_project_name,
)


URL_FRIENDLY = "name can only contain URL-friendly characters"
RESERVED = "name cannot be a core module or reserved name"


# ---------------------------------------------------------------------------
# Valid names
# ---------------------------------------------------------------------------


class TestValidNames:
    @pytest.mark.unit
    @pytest.mark.parametrize("name", [
        "some-package",
        "example.com",
        "under_score",
        "123numeric",
        "@npm/thingy",
        "@jane/foo.js",
        "my-app",
        "react-dom",
        "lodash",
        "a+b",
        "a:b",
        "a=b",
        "a$b",
        "a&b",
    ])
    def test_accepted(self, name: str):
        result = validate_npm_package_name(name)
        assert result.valid_for_new_packages is True
        assert result.valid_for_old_packages is True
        assert result.errors == []
        assert result.warnings == []

    @pytest.mark.unit
    def test_exactly_max_length_is_fine(self):
        result = validate_npm_package_name("a" * MAX_NAME_LENGTH)
        assert result.valid_for_new_packages is True


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class TestErrors:
    @pytest.mark.unit
    def test_empty_name_short_circuits(self):
        result = validate_npm_package_name("")
        assert result.valid_for_new_packages is False
        assert result.valid_for_old_packages is False
        assert result.errors == ["name length must be greater than zero"]
        assert result.warnings == []

    @pytest.mark.unit
    @pytest.mark.parametrize("name, message", [
        ("excited!", URL_FRIENDLY),
        (" leading-space", "name cannot contain leading or trailing spaces"),
        ("trailing-space ", "name cannot contain leading or trailing spaces"),
        (".start-with-dot", "name cannot start with a period or underscore"),
        ("_start-with-underscore", "name cannot start with a period or underscore"),
        ("has spaces", "name cannot contain spaces"),
        ("has~tilde", URL_FRIENDLY),
        ("has(parens)", URL_FRIENDLY),
        ("has'quote", URL_FRIENDLY),
        ("has!exclaim", URL_FRIENDLY),
        ("has*asterisk", URL_FRIENDLY),
        ("café", URL_FRIENDLY),
        ("100%", URL_FRIENDLY),
        ("http", RESERVED),
        ("stream", RESERVED),
        ("node_modules", RESERVED),
        ("favicon.ico", RESERVED),
    ])
    def test_rejected(self, name: str, message: str):
        result = validate_npm_package_name(name)
        assert result.valid_for_new_packages is False
        assert result.valid_for_old_packages is False
        assert message in result.errors

    @pytest.mark.unit
    def test_reserved_check_ignores_case(self):
        result = validate_npm_package_name("HTTP")
        assert RESERVED in result.errors

    @pytest.mark.unit
    def test_reserved_check_uses_unscoped_part(self):
        result = validate_npm_package_name("@scope/fs")
        assert RESERVED in result.errors

    @pytest.mark.unit
    def test_scoped_name_may_start_with_underscore(self):
        result = validate_npm_package_name("@scope/_private")
        assert result.valid_for_new_packages is True

    @pytest.mark.unit
    def test_url_error_reported_once(self):
        result = validate_npm_package_name("a(b)")
        assert result.errors.count(URL_FRIENDLY) == 1

    @pytest.mark.unit
    def test_every_rule_is_reported(self):
        result = validate_npm_package_name(" Bad Name!")
        assert "name cannot contain leading or trailing spaces" in result.errors
        assert "name cannot contain spaces" in result.errors
        assert URL_FRIENDLY in result.errors
        assert "name can no longer contain capital letters" in result.warnings

    @pytest.mark.unit
    def test_builtin_list_contains_reserved_names(self):
        assert {"node_modules", "favicon.ico", "fs", "worker_threads"} <= BUILTIN_MODULES


# ---------------------------------------------------------------------------
# Warnings
# ---------------------------------------------------------------------------


class TestWarnings:
    @pytest.mark.unit
    @pytest.mark.parametrize("name", ["UpperCase", "MixedCase-Package"])
    def test_capital_letters_only_warn(self, name: str):
        result = validate_npm_package_name(name)
        assert result.valid_for_new_packages is False
        assert result.valid_for_old_packages is True
        assert result.errors == []
        assert result.warnings == ["name can no longer contain capital letters"]

    @pytest.mark.unit
    def test_too_long(self):
        result = validate_npm_package_name("a" * (MAX_NAME_LENGTH + 1))
        assert result.valid_for_new_packages is False
        assert result.valid_for_old_packages is True
        assert result.warnings == ["name can no longer contain more than 214 characters"]


# ---------------------------------------------------------------------------
# Scoped names
# ---------------------------------------------------------------------------


class TestScopedNames:
    @pytest.mark.unit
    @pytest.mark.parametrize("name, valid", [
        ("@scope/package", True),
        ("@scope/package-name", True),
        ("@my-org/my-package", True),
        ("@", False),
        ("@scope", False),
        ("@scope/", False),
        ("@/package", False),
    ])
    def test_structure(self, name: str, valid: bool):
        result = validate_npm_package_name(name)
        assert result.valid_for_new_packages is valid
        if not valid:
            assert result.errors

    @pytest.mark.unit
    def test_missing_package_part(self):
        result = validate_npm_package_name("@scope")
        assert result.errors == [
            "scoped package name must include a package name after the scope"
        ]

    @pytest.mark.unit
    def test_empty_package_after_scope(self):
        result = validate_npm_package_name("@scope/")
        assert "package name after scope cannot be empty" in result.errors

    @pytest.mark.unit
    def test_empty_scope(self):
        result = validate_npm_package_name("@/package")
        assert "scope name cannot be empty" in result.errors


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


class TestHelpers:
    @pytest.mark.unit
    @pytest.mark.parametrize("name, valid", [
        ("valid-package", True),
        ("@scope/package", True),
        ("Invalid-Package", False),
        ("has spaces", False),
        ("", False),
    ])
    def test_is_valid_package_name(self, name: str, valid: bool):
        assert is_valid_package_name(name) is valid

    @pytest.mark.unit
    def test_problems_lists_errors_before_warnings(self):
        result = ValidationResult(errors=["e"], warnings=["w"])
        assert result.problems == ["e", "w"]

    @pytest.mark.unit
    def test_project_name_empty_is_accepted(self):
        assert validate_project_name("") is None

    @pytest.mark.unit
    def test_project_name_valid(self):
        assert validate_project_name("my-app") is None

    @pytest.mark.unit
    def test_project_name_returns_first_problem(self):
        assert validate_project_name("has spaces") == "name cannot contain spaces"

    @pytest.mark.unit
    def test_project_name_warning_blocks(self):
        assert validate_project_name("MyApp") == "name can no longer contain capital letters"

    @pytest.mark.unit
    @pytest.mark.parametrize("alias", ["", "@/*", "~/*", "#app/*"])
    def test_import_alias_accepted(self, alias: str):
        assert validate_import_alias(alias) is None

    @pytest.mark.unit
    @pytest.mark.parametrize("alias", ["@", "~/", "@/*/x"])
    def test_import_alias_rejected(self, alias: str):
        assert validate_import_alias(alias) == "import alias must end with '/*'"
