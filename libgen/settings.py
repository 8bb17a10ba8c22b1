"""Setting registry and run context.

``Settings`` is the fixed, ordered set of answers a generated library is
described by.  Field names are used inside Python and templates; the
camelCase aliases are the keys written to the project and global JSON
files.  The model is frozen: every question batch produces a new instance
through :meth:`Settings.merge`.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Settings(BaseModel):
    """Answers describing the library being generated."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    github_user: str | None = Field(default=None, alias="githubUser")
    author_name: str | None = Field(default=None, alias="authorName")
    author_email: str | None = Field(default=None, alias="authorEmail")
    lib_name: str | None = Field(default=None, alias="libName")
    lib_group: str | None = Field(default=None, alias="libGroup")
    lib_package: str | None = Field(default=None, alias="libPackage")
    lib_version: str | None = Field(default=None, alias="libVersion")
    lib_desc: str | None = Field(default=None, alias="libDesc")
    # lowest supported java, not the jdk the project is built with
    target_java: str | None = Field(default=None, alias="targetJava")
    lib_tags: str | None = Field(default=None, alias="libTags")
    bintray_user: str | None = Field(default=None, alias="bintrayUser")
    bintray_repo: str | None = Field(default=None, alias="bintrayRepo")
    bintray_sign_files: bool | None = Field(default=None, alias="bintraySignFiles")
    maven_central_sync: bool | None = Field(default=None, alias="mavenCentralSync")
    enable_quality_checks: bool | None = Field(default=None, alias="enableQualityChecks")

    @classmethod
    def from_stored(cls, data: Mapping[str, Any]) -> "Settings":
        """Build settings from a persisted JSON object (unknown keys ignored)."""
        return cls.model_validate(dict(data))

    def to_stored(self) -> dict[str, Any]:
        """Return the answered settings keyed by their persisted names."""
        return self.model_dump(by_alias=True, exclude_none=True)

    def as_answers(self) -> dict[str, Any]:
        """Return a mutable ``{field: value}`` copy, unanswered included."""
        return self.model_dump()

    def merge(self, answers: Mapping[str, Any]) -> "Settings":
        """Return a copy with *answers* applied; non-setting keys are dropped."""
        known = {k: v for k, v in answers.items() if k in SETTING_NAMES}
        return self.model_copy(update=known)

    def is_answered(self, name: str) -> bool:
        return getattr(self, name) is not None

    def missing(self) -> list[str]:
        """Setting names that have no value, in declared order."""
        return [name for name in SETTING_NAMES if not self.is_answered(name)]


# Declared order is the order questions are asked and persisted in.
SETTING_NAMES: tuple[str, ...] = tuple(Settings.model_fields)

# Reused across independent projects through the global defaults file.
GLOBAL_SETTINGS: frozenset[str] = frozenset(
    {
        "github_user",
        "author_name",
        "author_email",
        "lib_group",
        "bintray_user",
        "bintray_repo",
    }
)

# Fixed once the project exists; only asked again when missing.
IMMUTABLE_SETTINGS: frozenset[str] = frozenset({"lib_name", "lib_package", "lib_version"})


def persisted_name(name: str) -> str:
    """Return the JSON key for setting *name* (e.g. ``libName``)."""
    return Settings.model_fields[name].alias or name


class RunContext(BaseModel):
    """Flags derived once, before prompting, from the stored configuration."""

    model_config = ConfigDict(frozen=True)

    all_answered: bool
    update_mode: bool
    generator_version: str
    used_generator_version: str | None = None

    @classmethod
    def from_stored(
        cls,
        stored: Settings,
        *,
        generator_version: str,
        used_generator_version: str | None = None,
    ) -> "RunContext":
        """Compute ``all_answered`` / ``update_mode`` from *stored* settings.

        A partially populated configuration is an update run that still has
        questions to ask.
        """
        answered = [stored.is_answered(name) for name in SETTING_NAMES]
        return cls(
            all_answered=all(answered),
            update_mode=any(answered),
            generator_version=generator_version,
            used_generator_version=used_generator_version,
        )
