"""Question flow: which settings to ask, with what default, and how to check them.

Questions are declared as an ordered list.  Each one may carry a visibility
predicate (``when``), a default (literal or computed from the answers
accumulated so far), a ``filter`` applied to the raw input and a
``validate`` callable.  Validators raise ``ValidationError``; the engine
prints the message and asks the same question again.  Validators may be
coroutines, which is how the GitHub profile lookup plugs in.

Three batches are asked in order: identity, library name, and the rest.
"""

from __future__ import annotations

import inspect
import re
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Literal, Protocol

from rich.prompt import Confirm, Prompt

from .errors import ProfileLookupError, ValidationError
from .github import GitHubClient, GitHubProfile
from .settings import IMMUTABLE_SETTINGS, RunContext, Settings
from .store import GlobalDefaults
from .utils import console

Answers = dict[str, Any]

PACKAGE_RE = re.compile(r"^[A-Za-z_$][\w$]*(\.[A-Za-z_$][\w$]*)*$")
NAME_SEPARATORS_RE = re.compile(r"\s+|-|_")


# ---------------------------------------------------------------------------
# Question model
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Choice:
    value: str
    label: str


@dataclass(frozen=True)
class Question:
    """One prompt bound to a setting name."""

    name: str
    message: str
    kind: Literal["input", "confirm", "list"] = "input"
    default: Any = None
    validate: Callable[[Any, Answers], Any] | None = None
    when: Callable[[Answers], bool] | None = None
    filter: Callable[[Any], Any] | None = None
    choices: tuple[Choice, ...] = field(default_factory=tuple)

    def resolve_default(self, answers: Answers) -> Any:
        if callable(self.default):
            return self.default(answers)
        return self.default


class Prompter(Protocol):
    """Collects one answer from the operator."""

    def ask(self, question: Question, default: Any) -> Any: ...

    def error(self, message: str) -> None: ...


class RichPrompter:
    """Terminal prompter built on ``rich.prompt``."""

    def ask(self, question: Question, default: Any) -> Any:
        if question.kind == "confirm":
            return Confirm.ask(question.message, default=bool(default), console=console)
        kwargs: dict[str, Any] = {"console": console}
        if default not in (None, ""):
            kwargs["default"] = str(default)
        if question.kind == "list":
            for choice in question.choices:
                console.print(f"  [cyan]{choice.value}[/cyan]  {choice.label}")
            kwargs["choices"] = [choice.value for choice in question.choices]
        return Prompt.ask(question.message, **kwargs)

    def error(self, message: str) -> None:
        console.print(f"[bold red]>>[/bold red] {message}")


# ---------------------------------------------------------------------------
# Validation and derivation helpers
# ---------------------------------------------------------------------------


def required(message: str) -> Callable[[Any, Answers], None]:
    """Build a validator rejecting empty input with *message*."""

    def _check(value: Any, answers: Answers) -> None:
        if value is None or not str(value).strip():
            raise ValidationError(message)

    return _check


def validate_package(value: Any, answers: Answers) -> None:
    """Reject anything that is not a dotted Java identifier path."""
    if not value or not PACKAGE_RE.match(str(value)):
        raise ValidationError(f"'{value or ''}' is not a valid package name")


def one_of(choices: Sequence[Choice]) -> Callable[[Any, Answers], None]:
    allowed = [choice.value for choice in choices]

    def _check(value: Any, answers: Answers) -> None:
        if value not in allowed:
            raise ValidationError(f"Choose one of: {', '.join(allowed)}")

    return _check


def folder_name(name: str) -> str:
    """Normalise a library name so it can double as a folder name."""
    return re.sub(r"\s+", "-", str(name).strip())


def derive_package(group: str, lib_name: str) -> str:
    """``com.acme`` + ``my-lib`` -> ``com.acme.my.lib``."""
    return f"{group}.{NAME_SEPARATORS_RE.sub('.', lib_name)}"


def split_tags(tags: str | None) -> list[str]:
    """Split comma separated tag input into trimmed, non-empty tags."""
    if not tags:
        return []
    return [tag.strip() for tag in tags.split(",") if tag.strip()]


def resolve_default(
    name: str,
    settings: Settings,
    global_defaults: GlobalDefaults,
    literal: Any = None,
) -> Any:
    """Stored project value, then global default, then *literal*."""
    value = getattr(settings, name)
    if value is None:
        value = global_defaults.get(name)
    return literal if value is None else value


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------


async def ask_questions(
    questions: Sequence[Question],
    answers: Mapping[str, Any],
    prompter: Prompter,
) -> Answers:
    """Ask *questions* in order and return only the newly given answers.

    *answers* seeds the accumulated view seen by ``when`` predicates and
    computed defaults; it is not modified.
    """
    accumulated: Answers = dict(answers)
    given: Answers = {}
    for question in questions:
        if question.when is not None and not question.when(accumulated):
            continue
        default = question.resolve_default(accumulated)
        while True:
            value = prompter.ask(question, default)
            if question.filter is not None:
                value = question.filter(value)
            if question.validate is not None:
                try:
                    outcome = question.validate(value, accumulated)
                    if inspect.isawaitable(outcome):
                        await outcome
                except ValidationError as exc:
                    prompter.error(exc.message)
                    continue
            break
        accumulated[question.name] = value
        given[question.name] = value
    return given


JAVA_CHOICES: tuple[Choice, ...] = (
    Choice("1.6", "Java 6"),
    Choice("1.7", "Java 7"),
    Choice("1.8", "Java 8"),
)


class QuestionFlow:
    """Runs the three question batches against the stored settings.

    Args:
        settings: Settings loaded from the project store (possibly empty).
        context: Run flags computed from *settings*.
        global_defaults: Cross-project defaults.
        prompter: Where answers come from.
        github: Profile client, or ``None`` when running offline.
        ask_all: Re-ask optional questions even when everything is stored.
        default_name: Library name offered on first generation.
    """

    def __init__(
        self,
        settings: Settings,
        context: RunContext,
        global_defaults: GlobalDefaults,
        prompter: Prompter,
        *,
        github: GitHubClient | None = None,
        ask_all: bool = False,
        default_name: str = "",
    ) -> None:
        self.stored = settings
        self.context = context
        self.global_defaults = global_defaults
        self.prompter = prompter
        self.github = github
        self.ask_all = ask_all
        self.default_name = folder_name(default_name)
        self.profile: GitHubProfile | None = None
        self._failed_handle: str | None = None
        self.asked: list[str] = []

    # -- Public API --------------------------------------------------------

    async def run(self) -> Settings:
        """Ask every batch and return the merged settings."""
        settings = self.stored
        for batch in (self.identity_questions, self.name_questions, self.library_questions):
            settings = await self._ask_batch(batch(), settings)
        return settings

    def should_ask(self, name: str) -> bool:
        """Skip policy for a single setting."""
        if not self.context.update_mode:
            return True
        missing = not self.stored.is_answered(name)
        if name in IMMUTABLE_SETTINGS:
            return missing
        if self.ask_all:
            return True
        if self.context.all_answered:
            return False
        return missing

    # -- Batches -----------------------------------------------------------

    def identity_questions(self) -> list[Question]:
        return [
            Question(
                name="github_user",
                message="GitHub user name",
                default=self._default("github_user"),
                validate=self._check_github_user,
            ),
            Question(
                name="author_name",
                message="Author name",
                default=lambda answers: self._profile_value("name") or self._default("author_name"),
                validate=required("Author name required"),
            ),
            Question(
                name="author_email",
                message="Author email",
                default=lambda answers: self._profile_value("email") or self._default("author_email"),
                validate=required("Author email required"),
            ),
        ]

    def name_questions(self) -> list[Question]:
        return [
            Question(
                name="lib_name",
                message=(
                    f"Library name (accept [red]{self.default_name}[/red] to generate in the "
                    "current folder, otherwise a new folder is created)"
                ),
                default=self.stored.lib_name or self.default_name,
                filter=folder_name,
                validate=required("Library name required"),
            )
        ]

    def library_questions(self) -> list[Question]:
        return [
            Question(
                name="lib_group",
                message="Maven artifact group",
                default=self._default("lib_group", "com.mycompany"),
                validate=validate_package,
            ),
            Question(
                name="lib_package",
                message="Base package",
                default=self._package_default,
                validate=validate_package,
            ),
            Question(name="lib_desc", message="Description", default=self.stored.lib_desc),
            Question(name="lib_version", message="Version", default=self._default("lib_version", "0.1.0")),
            Question(
                name="target_java",
                message="Target java version (the lowest version you want to be compatible with)",
                kind="list",
                default=self._default("target_java", "1.6"),
                choices=JAVA_CHOICES,
                validate=one_of(JAVA_CHOICES),
            ),
            Question(
                name="lib_tags",
                message="Tags for bintray package (comma separated list)",
                default=self.stored.lib_tags,
            ),
            Question(
                name="bintray_user",
                message="Bintray user name (used for badge generation only)",
                default=self._default("bintray_user"),
                validate=required("Bintray user name required"),
            ),
            Question(
                name="bintray_repo",
                message="Bintray maven repository name",
                default=self._default("bintray_repo"),
                validate=required("Bintray repository name required"),
            ),
            Question(
                name="bintray_sign_files",
                message="Should bintray sign files on release (bintray must be configured accordingly)?",
                kind="confirm",
                default=self._default("bintray_sign_files", True),
            ),
            Question(
                name="maven_central_sync",
                message="Should bintray publish to maven central on release?",
                kind="confirm",
                default=self._default("maven_central_sync", True),
                when=lambda answers: bool(answers.get("bintray_sign_files")),
            ),
            Question(
                name="enable_quality_checks",
                message="Enable code quality checks (checkstyle, pmd, findbugs)?",
                kind="confirm",
                default=self._default("enable_quality_checks", True),
            ),
        ]

    # -- Internals ---------------------------------------------------------

    async def _ask_batch(self, questions: list[Question], settings: Settings) -> Settings:
        pending = [q for q in questions if self.should_ask(q.name)]
        if not pending:
            return settings
        given = await ask_questions(pending, settings.as_answers(), self.prompter)
        self.asked.extend(given)
        return settings.merge(given)

    def _default(self, name: str, literal: Any = None) -> Any:
        return resolve_default(name, self.stored, self.global_defaults, literal)

    def _profile_value(self, attr: str) -> str | None:
        if self.profile is None:
            return None
        return getattr(self.profile, attr)

    def _package_default(self, answers: Answers) -> str | None:
        if self.stored.lib_package:
            return self.stored.lib_package
        group = answers.get("lib_group")
        name = answers.get("lib_name")
        if not group or not name:
            return None
        return derive_package(group, name)

    async def _check_github_user(self, value: Any, answers: Answers) -> None:
        if not value:
            raise ValidationError("GitHub user required")
        if self.github is None or value == self._failed_handle:
            # offline, or the user confirmed the handle after a failed lookup
            return
        try:
            self.profile = await self.github.fetch_profile(value)
        except ProfileLookupError as exc:
            self.profile = None
            self._failed_handle = value
            raise ValidationError(
                f"Cannot fetch your GitHub profile [red]{value}[/red] ({exc.reason}). "
                "Make sure you've typed it correctly, enter the same name again to fill "
                "in author details manually, or run with --offline."
            ) from exc
