"""Execution-environment probes: CI detection and registry reachability."""

from __future__ import annotations

import os

import httpx

CI_ENV_VARS: tuple[str, ...] = (
    "CI",
    "CONTINUOUS_INTEGRATION",
    "GITHUB_ACTIONS",
    "GITLAB_CI",
    "CIRCLECI",
    "TRAVIS",
    "JENKINS_URL",
    "BUILDKITE",
    "DRONE",
    "TEAMCITY_VERSION",
)

NPM_REGISTRY_URL = "https://registry.npmjs.org/"


def is_ci() -> bool:
    """Return ``True`` when any known CI variable is set to something other than ``false``."""
    for name in CI_ENV_VARS:
        value = os.environ.get(name, "")
        if value and value.lower() != "false":
            return True
    return False


async def is_online(url: str = NPM_REGISTRY_URL, timeout: float = 3.0) -> bool:
    """Return ``True`` if the npm registry answers at all.

    Any HTTP response counts as online; only transport failures count as
    offline.
    """
    try:
        async with httpx.AsyncClient(timeout=httpx.Timeout(timeout)) as client:
            await client.head(url)
    except httpx.HTTPError:
        return False
    return True
