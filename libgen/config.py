"""Library generator configuration.

Typed configuration for one generator run.  Settings use a Pydantic v2 model
so they are validated at construction time; ``from_env`` fills in the
locations that are normally taken from the user's environment.
"""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import BaseModel, Field

PROJECT_CONFIG_NAME = ".libgen.json"
GLOBAL_CONFIG_NAME = ".libgen-global.json"


def _default_global_config() -> Path:
    return Path.home() / GLOBAL_CONFIG_NAME


def _default_gradle_properties() -> Path:
    return Path.home() / ".gradle" / "gradle.properties"


class Config(BaseModel):
    """Options and paths for a single generator run.

    Instances are created once by the CLI entry point and handed to the
    ``Pipeline``.
    """

    destination: Path = Field(default_factory=Path.cwd)
    offline: bool = Field(default=False, description="Disable the GitHub profile lookup")
    ask: bool = Field(
        default=False,
        description="Ask every question even when all answers are stored",
    )
    global_config_path: Path = Field(default_factory=_default_global_config)
    gradle_properties_path: Path = Field(default_factory=_default_gradle_properties)
    github_api_url: str = Field(default="https://api.github.com")
    github_token: str | None = Field(default=None)
    github_timeout: int = Field(default=10, ge=1, description="Profile lookup timeout in seconds")

    # ------------------------------------------------------------------
    # Derived paths (read-only properties)
    # ------------------------------------------------------------------

    @property
    def project_config_path(self) -> Path:
        """Path to the persisted project answers in the destination."""
        return self.destination / PROJECT_CONFIG_NAME

    # ------------------------------------------------------------------
    # Construction helpers
    # ------------------------------------------------------------------

    @classmethod
    def from_env(cls, **overrides: object) -> "Config":
        """Build a ``Config`` from environment variables.

        Recognised variables (all optional):
            LIBGEN_GLOBAL_CONFIG, GRADLE_USER_HOME, LIBGEN_GITHUB_API,
            GITHUB_TOKEN.

        Keyword *overrides* (typically the parsed CLI flags) win over the
        environment.
        """
        values: dict[str, object] = {}
        if os.environ.get("LIBGEN_GLOBAL_CONFIG"):
            values["global_config_path"] = Path(os.environ["LIBGEN_GLOBAL_CONFIG"])
        if os.environ.get("GRADLE_USER_HOME"):
            values["gradle_properties_path"] = (
                Path(os.environ["GRADLE_USER_HOME"]) / "gradle.properties"
            )
        if os.environ.get("LIBGEN_GITHUB_API"):
            values["github_api_url"] = os.environ["LIBGEN_GITHUB_API"]
        if os.environ.get("GITHUB_TOKEN"):
            values["github_token"] = os.environ["GITHUB_TOKEN"]
        values.update(overrides)
        return cls(**values)
