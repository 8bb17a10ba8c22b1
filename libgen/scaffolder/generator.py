"""Main scaffolding orchestrator.

Takes the final ``Settings`` and ``RunContext`` and materialises the gradle
java library: wrapper scripts, build files, CI config, license and (only on
the first run) the source skeleton.  Generated boilerplate is refreshed on
every run; files the user is expected to edit are written once.
"""

from __future__ import annotations

import asyncio
from datetime import date
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

from ..errors import FilesystemError
from ..questions import split_tags
from ..settings import RunContext, Settings
from ..utils import make_executable, print_skip
from .templates import TemplateRenderer, TreeResult, replace_segment

# ---------------------------------------------------------------------------
# Template trees
# ---------------------------------------------------------------------------

GRADLE_BASE = "gradle-base"
PROJECT_BASE = "project-base"
SOURCES = "sources"

# Path segment in the sources tree replaced by the package directory.
PACKAGE_TOKEN = "package"

# Never overwritten once present: the user owns these after generation.
WRITE_ONCE_FILES: tuple[str, ...] = (
    "gradlew",
    "gradlew.bat",
    ".gitignore",
    ".travis.yml",
    "CHANGELOG.md",
    "README.md",
    "gradle.properties",
    "LICENSE",
    "settings.gradle",
    "build-deps.gradle",
    "gradle/config/findbugs/exclude.xml",
)

ANIMALSNIFFER_SIGNATURES: dict[str, str] = {
    "1.6": "org.codehaus.mojo.signature:java16-sun:+@signature",
    "1.7": "org.codehaus.mojo.signature:java17:+@signature",
    "1.8": "",  # animalsniffer is switched off for the latest java
}

# oraclejdk7 for 1.6 too: compatibility is checked by animalsniffer
TRAVIS_JDKS: dict[str, str] = {
    "1.6": "oraclejdk7",
    "1.7": "oraclejdk7",
    "1.8": "oraclejdk8",
}


class GenerationResult(BaseModel):
    """Summary of one ``LibraryGenerator.generate`` call."""

    root: Path
    files: TreeResult = Field(default_factory=TreeResult)
    sources_generated: bool = False
    gradlew_made_executable: bool = False


# ---------------------------------------------------------------------------
# Context building
# ---------------------------------------------------------------------------


def effective_maven_central_sync(settings: Settings, context: RunContext) -> bool:
    """Value rendered into build.gradle.

    Sync is impossible on the first release and requires signed artifacts,
    so the stored answer only takes effect on update runs with signing on.
    """
    return bool(
        context.update_mode and settings.maven_central_sync and settings.bintray_sign_files
    )


def build_template_context(
    settings: Settings,
    context: RunContext,
    today: date | None = None,
) -> dict[str, Any]:
    """Build the Jinja2 template context from the final settings."""
    today = today or date.today()
    target_java = settings.target_java or "1.6"
    ctx: dict[str, Any] = settings.as_answers()
    ctx.update(
        {
            "lib_desc": settings.lib_desc or "",
            "lib_tags_list": split_tags(settings.lib_tags),
            "maven_central_sync": effective_maven_central_sync(settings, context),
            "package_folder": (settings.lib_package or "").replace(".", "/"),
            "animalsniffer_signature": ANIMALSNIFFER_SIGNATURES.get(target_java, ""),
            "travis_jdk": TRAVIS_JDKS.get(target_java, "oraclejdk8"),
            "generator_version": context.generator_version,
            "year": today.year,
            "date": f"{today.day}.{today.month:02d}.{today.year}",
            "reverse_date": today.isoformat(),
        }
    )
    return ctx


# ---------------------------------------------------------------------------
# Main generator
# ---------------------------------------------------------------------------


class LibraryGenerator:
    """Copies the template trees into a project root."""

    def __init__(self, renderer: TemplateRenderer | None = None) -> None:
        self.renderer = renderer or TemplateRenderer()

    async def generate(
        self,
        root: str | Path,
        settings: Settings,
        context: RunContext,
        *,
        today: date | None = None,
    ) -> GenerationResult:
        """Write the project files into *root*.

        Args:
            root: Project root (created if missing).
            settings: Final answers; ``lib_package`` must be set.
            context: Run flags (drives the maven central forcing).
            today: Date used by the write-once templates (tests pin it).

        Returns:
            What was written, skipped and whether sources were generated.

        Raises:
            FilesystemError: If any destination write fails.
        """
        project_root = Path(root)
        try:
            await asyncio.to_thread(project_root.mkdir, parents=True, exist_ok=True)
        except OSError as exc:
            raise FilesystemError(project_root, exc) from exc

        ctx = build_template_context(settings, context, today)
        result = GenerationResult(root=project_root)
        gradlew = project_root / "gradlew"
        gradlew_existed = gradlew.exists()

        # 1. Wrapper scripts (static)
        result.files.extend(
            await self.renderer.copy_tree(
                GRADLE_BASE, project_root, ctx, write_once=WRITE_ONCE_FILES
            )
        )

        # 2. Build files, docs, CI (rendered)
        result.files.extend(
            await self.renderer.copy_tree(
                PROJECT_BASE, project_root, ctx, write_once=WRITE_ONCE_FILES
            )
        )

        # 3. Source skeleton, only while src/main does not exist
        if not (project_root / "src" / "main").exists():
            result.files.extend(
                await self.renderer.copy_tree(
                    SOURCES,
                    project_root,
                    ctx,
                    rewrite=replace_segment(PACKAGE_TOKEN, ctx["package_folder"]),
                )
            )
            result.sources_generated = True
        else:
            print_skip("sources generation")

        # 4. Executable flag is set manually since package data loses it
        if not gradlew_existed and gradlew.exists():
            try:
                await asyncio.to_thread(make_executable, gradlew)
            except OSError as exc:
                raise FilesystemError(gradlew, exc) from exc
            result.gradlew_made_executable = True

        return result
