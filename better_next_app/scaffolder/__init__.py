"""better-next-app scaffolder -- installs a bundled Next.js template.

Copies the selected template into the target directory, applies the literal
config rewrites the user's options call for, and writes ``package.json``.

Quick usage::

    from better_next_app.config import InstallRequest, TemplateSelection
    from better_next_app.scaffolder import install_template

    request = InstallRequest(
        app_name="my-app",
        root=Path("/tmp/my-app"),
        selection=TemplateSelection(family="app", mode="ts"),
        skip_install=True,
    )
    project_root = await install_template(request)
"""

from better_next_app.scaffolder.installer import (
    TemplateInstallError,
    TemplateInstaller,
    install_dependencies,
    install_template,
)
from better_next_app.scaffolder.manifest import build_package_json, serialize_package_json
from better_next_app.scaffolder.templates import TemplateSource, TemplateStore

__all__ = [
    "TemplateInstallError",
    "TemplateInstaller",
    "TemplateSource",
    "TemplateStore",
    "build_package_json",
    "install_dependencies",
    "install_template",
    "serialize_package_json",
]
