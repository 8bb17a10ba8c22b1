"""Jinja2 template rendering and tree copying for project scaffolding.

Provides the TemplateRenderer class which loads templates from the
``libgen/scaffolder/templates/`` directory.  A template tree is copied into
the destination file by file: ``*.j2`` files are rendered with the context
(suffix stripped), everything else is copied byte for byte.  A leading ``_``
in a file name becomes ``.`` so dotfiles can ship inside the package.
"""

from __future__ import annotations

import asyncio
import shutil
from collections.abc import Callable, Iterable
from pathlib import Path, PurePosixPath
from typing import Any

from jinja2 import Environment, FileSystemLoader, StrictUndefined, select_autoescape
from pydantic import BaseModel, Field

from ..errors import FilesystemError
from ..utils import print_file_action, write_text

# ---------------------------------------------------------------------------
# Template directory discovery
# ---------------------------------------------------------------------------

_DEFAULT_TEMPLATE_DIR = Path(__file__).parent / "templates"

PathRewrite = Callable[[PurePosixPath], PurePosixPath]


class TreeResult(BaseModel):
    """Relative output paths touched while copying one template tree."""

    created: list[str] = Field(default_factory=list)
    updated: list[str] = Field(default_factory=list)
    skipped: list[str] = Field(default_factory=list)

    @property
    def written(self) -> list[str]:
        return self.created + self.updated

    def extend(self, other: "TreeResult") -> None:
        self.created.extend(other.created)
        self.updated.extend(other.updated)
        self.skipped.extend(other.skipped)


def replace_segment(token: str, replacement: str) -> PathRewrite:
    """Build a rewrite replacing every path segment equal to *token*.

    *replacement* may contain slashes (``com/acme/lib``); it is expanded into
    nested directories.
    """
    parts = tuple(p for p in replacement.split("/") if p)

    def _rewrite(path: PurePosixPath) -> PurePosixPath:
        out: list[str] = []
        for segment in path.parts:
            out.extend(parts if segment == token else (segment,))
        return PurePosixPath(*out)

    return _rewrite


# ---------------------------------------------------------------------------
# TemplateRenderer
# ---------------------------------------------------------------------------


class TemplateRenderer:
    """Renders and copies template trees for library scaffolding.

    Each top-level directory under the template root is a named tree
    (``gradle-base``, ``project-base``, ``sources``).
    """

    def __init__(self, template_dir: str | Path | None = None) -> None:
        if template_dir is None:
            template_dir = _DEFAULT_TEMPLATE_DIR
        self.template_dir = Path(template_dir)
        self.env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=select_autoescape([]),
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
            undefined=StrictUndefined,
        )

    # -- Single template rendering -----------------------------------------

    def render(self, template_path: str, context: dict[str, Any]) -> str:
        """Render a single template with the provided context.

        Args:
            template_path: Path relative to the template directory (e.g.
                ``"project-base/build.gradle.j2"``).
            context: Dictionary of variables available inside the template.
        """
        template = self.env.get_template(template_path)
        return template.render(**context)

    # -- Tree copying (async) ----------------------------------------------

    async def copy_tree(
        self,
        tree: str,
        output_dir: str | Path,
        context: dict[str, Any],
        *,
        write_once: Iterable[str] = (),
        rewrite: PathRewrite | None = None,
    ) -> TreeResult:
        """Copy every file under *tree* into *output_dir*.

        Args:
            tree: Directory name inside the template root.
            output_dir: Destination root.
            context: Template context for ``*.j2`` files.
            write_once: Output paths (relative, posix) that are only written
                when absent from the destination.
            rewrite: Optional output path rewrite (package placeholder).

        Returns:
            Which output paths were created, overwritten or skipped.

        Raises:
            FilesystemError: If a destination file cannot be written.
        """
        protected = set(write_once)
        tree_dir = self.template_dir / tree
        out_base = Path(output_dir)
        result = TreeResult()
        if not tree_dir.is_dir():
            return result

        for source in sorted(p for p in tree_dir.rglob("*") if p.is_file()):
            rel = PurePosixPath(source.relative_to(tree_dir).as_posix())
            is_template = rel.suffix == ".j2"
            target_rel = output_path(rel)
            if rewrite is not None:
                target_rel = rewrite(target_rel)
            key = target_rel.as_posix()
            target = out_base / target_rel

            exists = target.exists()
            if exists and key in protected:
                result.skipped.append(key)
                print_file_action("skip", key)
                continue

            try:
                if is_template:
                    content = self.render(f"{tree}/{rel.as_posix()}", context)
                    await asyncio.to_thread(write_text, target, content)
                else:
                    await asyncio.to_thread(_copy_file, source, target)
            except OSError as exc:
                raise FilesystemError(target, exc) from exc

            (result.updated if exists else result.created).append(key)
            print_file_action("update" if exists else "create", key)

        return result

    # -- Utility -----------------------------------------------------------

    def list_templates(self, tree: str = "") -> list[str]:
        """Return a sorted list of all template files under *tree*.

        Paths are relative to the template root directory.
        """
        search_dir = self.template_dir / tree if tree else self.template_dir
        if not search_dir.is_dir():
            return []
        return sorted(
            p.relative_to(self.template_dir).as_posix()
            for p in search_dir.rglob("*")
            if p.is_file()
        )


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def output_path(rel: PurePosixPath) -> PurePosixPath:
    """Map a template path to its output path (``_gitignore.j2`` -> ``.gitignore``)."""
    name = rel.name
    if name.endswith(".j2"):
        name = name[: -len(".j2")]
    if name.startswith("_"):
        name = "." + name[1:]
    return rel.with_name(name)


def _copy_file(source: Path, target: Path) -> None:
    """Synchronous helper: create parent dirs and copy content and mode."""
    target.parent.mkdir(parents=True, exist_ok=True)
    shutil.copyfile(source, target)
    shutil.copymode(source, target)
