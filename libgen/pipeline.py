"""Library generator pipeline.

Runs one generation as a strict sequence of phases:

initialize -- read stored answers, global defaults and gradle properties.
prompt     -- ask whatever is not answered yet (or everything with --ask).
configure  -- settle the project root and persist the answers.
write      -- materialise the template trees.
finalize   -- print the setup instructions still left to the operator.

Usage::

    libgen                 # generate or update the library in the cwd
    libgen --offline       # no GitHub profile lookup
    libgen --ask           # re-ask questions on update
"""

from __future__ import annotations

import asyncio
import sys
from datetime import date
from pathlib import Path

from pydantic import BaseModel, Field

from libgen import __version__
from libgen.config import Config
from libgen.errors import LibgenError
from libgen.github import GitHubClient
from libgen.notifier import GradleProperties, Notice, collect_notices, print_notices
from libgen.questions import Prompter, QuestionFlow, RichPrompter
from libgen.scaffolder import GenerationResult, LibraryGenerator
from libgen.settings import RunContext, Settings
from libgen.store import GlobalDefaults, ProjectStore
from libgen.utils import (
    console,
    print_banner,
    print_error,
    print_phase_header,
    print_success,
    print_warning,
)


class PipelineResult(BaseModel):
    """Outcome of a completed run."""

    root: Path
    settings: Settings
    context: RunContext
    asked: list[str] = Field(default_factory=list)
    generation: GenerationResult | None = None
    notices: list[Notice] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Pipeline Orchestrator
# ---------------------------------------------------------------------------


class Pipeline:
    """Drives one generator run through the five phases.

    Attributes:
        config: Options and paths for this run.
        root: Project root; may move into a subfolder during ``configure``.
        settings: Current answers, replaced (never mutated) by each phase.
        context: Flags derived from the stored answers during ``initialize``.
    """

    def __init__(
        self,
        config: Config,
        *,
        prompter: Prompter | None = None,
        github: GitHubClient | None = None,
        generator: LibraryGenerator | None = None,
        today: date | None = None,
    ) -> None:
        self.config = config
        self.prompter = prompter or RichPrompter()
        if config.offline:
            github = None
        elif github is None:
            github = GitHubClient(
                base_url=config.github_api_url,
                timeout=config.github_timeout,
                token=config.github_token,
            )
        self.github = github
        self.generator = generator or LibraryGenerator()
        self.today = today
        self.root = Path(config.destination)
        self.settings = Settings()
        self.context: RunContext | None = None
        self.global_defaults = GlobalDefaults(config.global_config_path)
        self.gradle: GradleProperties | None = None
        self.asked: list[str] = []

    async def run(self) -> PipelineResult:
        """Execute every phase in order and return the outcome.

        Raises:
            FilesystemError: If the destination cannot be read or written.
        """
        self.initialize()
        await self.prompt()
        await self.configure()
        generation = await self.write()
        notices = self.finalize()
        context = self._require_context()
        return PipelineResult(
            root=self.root,
            settings=self.settings,
            context=context,
            asked=self.asked,
            generation=generation,
            notices=notices,
        )

    # ------------------------------------------------------------------
    # Phases
    # ------------------------------------------------------------------

    def initialize(self) -> RunContext:
        """Load stored answers and derive the run context."""
        stored, used_version = ProjectStore(self.root).load()
        self.settings = stored
        self.context = RunContext.from_stored(
            stored,
            generator_version=__version__,
            used_generator_version=used_version,
        )
        self.global_defaults = GlobalDefaults.load(self.config.global_config_path)
        self.gradle = GradleProperties.read(self.config.gradle_properties_path)
        return self.context

    async def prompt(self) -> Settings:
        """Greet the operator and ask the outstanding questions."""
        context = self._require_context()
        print_banner(context.generator_version)
        if context.update_mode:
            console.print(
                f"Updating library [red]{self.settings.lib_name or self.root.name}[/red], "
                f"generated with v.[green]{context.used_generator_version or '?'}[/green]"
            )
            if context.all_answered and not self.config.ask:
                console.print()
                console.print(
                    "Using stored answers from .libgen.json.\n"
                    "If you need to re-run questions use the --ask option."
                )
            console.print()

        flow = QuestionFlow(
            self.settings,
            context,
            self.global_defaults,
            self.prompter,
            github=self.github,
            ask_all=self.config.ask,
            default_name=self.root.name,
        )
        self.settings = await flow.run()
        self.asked = list(flow.asked)
        return self.settings

    async def configure(self) -> Path:
        """Settle the project root and persist project and global answers.

        On first generation a library name different from the destination
        folder name moves the project into a subfolder of that name.
        """
        context = self._require_context()
        print_phase_header("configure")
        lib_name = self.settings.lib_name
        if not context.update_mode and lib_name and lib_name != self.root.name:
            self.root = self.root / lib_name
            console.print(f"Generating into new folder [green]{self.root}[/green]")

        await ProjectStore(self.root).save(self.settings, context.generator_version)
        self.global_defaults.update(self.settings)
        await self.global_defaults.save()
        return self.root

    async def write(self) -> GenerationResult:
        """Materialise the template trees into the project root."""
        context = self._require_context()
        print_phase_header("write")
        return await self.generator.generate(
            self.root, self.settings, context, today=self.today
        )

    def finalize(self) -> list[Notice]:
        """Print operator instructions; changes nothing on disk."""
        context = self._require_context()
        notices = collect_notices(
            self.settings, context, self.gradle, self.config.gradle_properties_path
        )
        print_notices(notices)
        console.print()
        print_success(f"Library {self.settings.lib_name} is ready in {self.root}")
        return notices

    def _require_context(self) -> RunContext:
        if self.context is None:
            raise RuntimeError("Pipeline.initialize() must run first")
        return self.context


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for ``libgen`` / ``python -m libgen.pipeline``."""
    import argparse

    parser = argparse.ArgumentParser(
        prog="libgen",
        description="Generate or update a gradle java library project",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  libgen                  # new library, or update the one in the cwd\n"
            "  libgen --offline        # skip the GitHub profile lookup\n"
            "  libgen --ask            # re-ask stored questions on update\n"
        ),
    )
    parser.add_argument(
        "--offline",
        action="store_true",
        help="Disable the GitHub user lookup",
    )
    parser.add_argument(
        "--ask",
        action="store_true",
        help="Ask questions even when all answers are stored (project update)",
    )
    parser.add_argument(
        "--dest",
        default=None,
        help="Destination folder (default: current directory)",
    )

    args = parser.parse_args(argv)

    overrides: dict[str, object] = {"offline": args.offline, "ask": args.ask}
    if args.dest:
        overrides["destination"] = Path(args.dest)
    config = Config.from_env(**overrides)

    try:
        asyncio.run(Pipeline(config).run())
    except KeyboardInterrupt:
        console.print()
        print_warning("Aborted.")
        sys.exit(130)
    except LibgenError as exc:
        print_error(f"Error: {exc}")
        sys.exit(1)


if __name__ == "__main__":
    main()
