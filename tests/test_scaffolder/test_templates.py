"""Tests for template rendering and tree copying (libgen.scaffolder.templates).

Covers:
- output_path naming rules (``.j2`` stripping, ``_`` dotfiles)
- replace_segment package expansion
- TemplateRenderer.render with StrictUndefined
- copy_tree: rendering, static copies, write-once skipping, path rewrites
"""

from __future__ import annotations

import stat
from pathlib import Path, PurePosixPath

import pytest
from jinja2 import UndefinedError

from libgen.errors import FilesystemError
from libgen.scaffolder.templates import (
    TemplateRenderer,
    TreeResult,
    output_path,
    replace_segment,
)

pytestmark = pytest.mark.unit


@pytest.fixture
def template_dir(tmp_path: Path) -> Path:
    """A small template root with one tree named ``base``."""
    root = tmp_path / "templates"
    base = root / "base"
    (base / "conf").mkdir(parents=True)
    (base / "src" / "package").mkdir(parents=True)
    (base / "README.md.j2").write_text("# {{ name }}\n", encoding="utf-8")
    (base / "_gitignore.j2").write_text("build/\n", encoding="utf-8")
    (base / "conf" / "static.xml").write_text("<x>{{ not_rendered }}</x>\n", encoding="utf-8")
    (base / "src" / "package" / "Main.java.j2").write_text(
        "package {{ pkg }};\n", encoding="utf-8"
    )
    script = base / "run.sh"
    script.write_text("#!/bin/sh\n", encoding="utf-8")
    script.chmod(0o755)
    return root


@pytest.fixture
def renderer(template_dir: Path) -> TemplateRenderer:
    return TemplateRenderer(template_dir)


CONTEXT = {"name": "my-lib", "pkg": "com.acme.my.lib"}


class TestOutputPath:
    def test_strips_template_suffix(self):
        assert output_path(PurePosixPath("a/build.gradle.j2")) == PurePosixPath("a/build.gradle")

    def test_underscore_becomes_dot(self):
        assert output_path(PurePosixPath("_travis.yml.j2")) == PurePosixPath(".travis.yml")

    def test_static_name_untouched(self):
        assert output_path(PurePosixPath("gradlew")) == PurePosixPath("gradlew")


class TestReplaceSegment:
    def test_expands_nested_package(self):
        rewrite = replace_segment("package", "com/acme/lib")
        assert rewrite(PurePosixPath("src/main/java/package/Sample.java")) == PurePosixPath(
            "src/main/java/com/acme/lib/Sample.java"
        )

    def test_only_whole_segments(self):
        rewrite = replace_segment("package", "com/acme")
        path = PurePosixPath("src/package-info/packages.txt")
        assert rewrite(path) == path


class TestRender:
    def test_render(self, renderer):
        assert renderer.render("base/README.md.j2", CONTEXT) == "# my-lib\n"

    def test_missing_variable_fails(self, renderer):
        with pytest.raises(UndefinedError):
            renderer.render("base/README.md.j2", {})

    def test_list_templates(self, renderer):
        assert renderer.list_templates("base") == [
            "base/README.md.j2",
            "base/_gitignore.j2",
            "base/conf/static.xml",
            "base/run.sh",
            "base/src/package/Main.java.j2",
        ]
        assert renderer.list_templates("missing") == []

    def test_default_template_dir_has_trees(self):
        names = TemplateRenderer().list_templates()
        assert "project-base/build.gradle.j2" in names
        assert "gradle-base/gradlew" in names
        assert "sources/src/main/java/package/Sample.java.j2" in names


class TestCopyTree:
    async def test_first_copy(self, renderer, tmp_path):
        out = tmp_path / "out"

        result = await renderer.copy_tree(
            "base", out, CONTEXT, rewrite=replace_segment("package", "com/acme/my/lib")
        )

        assert sorted(result.created) == [
            ".gitignore",
            "README.md",
            "conf/static.xml",
            "run.sh",
            "src/com/acme/my/lib/Main.java",
        ]
        assert result.updated == [] and result.skipped == []
        assert (out / "README.md").read_text(encoding="utf-8") == "# my-lib\n"
        assert (out / "conf" / "static.xml").read_text(encoding="utf-8") == (
            "<x>{{ not_rendered }}</x>\n"
        )
        main = out / "src" / "com" / "acme" / "my" / "lib" / "Main.java"
        assert main.read_text(encoding="utf-8") == "package com.acme.my.lib;\n"
        assert (out / "run.sh").stat().st_mode & stat.S_IXUSR

    async def test_write_once_files_are_skipped(self, renderer, tmp_path):
        out = tmp_path / "out"
        await renderer.copy_tree("base", out, CONTEXT, write_once=("README.md",))
        (out / "README.md").write_text("# edited\n", encoding="utf-8")

        result = await renderer.copy_tree(
            "base", out, {**CONTEXT, "name": "renamed"}, write_once=("README.md",)
        )

        assert result.skipped == ["README.md"]
        assert "README.md" not in result.written
        assert ".gitignore" in result.updated
        assert (out / "README.md").read_text(encoding="utf-8") == "# edited\n"

    async def test_other_files_are_overwritten(self, renderer, tmp_path):
        out = tmp_path / "out"
        (out / "conf").mkdir(parents=True)
        (out / "conf" / "static.xml").write_text("changed", encoding="utf-8")

        result = await renderer.copy_tree("base", out, CONTEXT)

        assert "conf/static.xml" in result.updated
        assert (out / "conf" / "static.xml").read_text(encoding="utf-8").startswith("<x>")

    async def test_missing_tree(self, renderer, tmp_path):
        result = await renderer.copy_tree("nope", tmp_path / "out", CONTEXT)
        assert result == TreeResult()

    async def test_write_failure(self, renderer, tmp_path):
        blocker = tmp_path / "out"
        blocker.write_text("not a directory", encoding="utf-8")

        with pytest.raises(FilesystemError):
            await renderer.copy_tree("base", blocker, CONTEXT)


class TestTreeResult:
    def test_extend_and_written(self):
        result = TreeResult(created=["a"])
        result.extend(TreeResult(created=["b"], updated=["c"], skipped=["d"]))
        assert result.written == ["a", "b", "c"]
        assert result.skipped == ["d"]
