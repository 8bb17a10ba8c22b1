"""Post-generation instructions for the operator.

Looks at the final settings and a read-only snapshot of the user's global
``gradle.properties`` and tells the operator what still has to be configured
by hand before the first release.  Nothing here writes files.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field

from .settings import RunContext, Settings
from .utils import console


class GradleProperties(BaseModel):
    """The global gradle configuration keys the notices depend on."""

    path: Path
    bintray_user: str | None = Field(default=None)
    sonatype_user: str | None = Field(default=None)

    @classmethod
    def read(cls, path: str | Path) -> "GradleProperties | None":
        """Parse *path*; ``None`` when the file is missing or unreadable."""
        path = Path(path)
        try:
            text = path.read_text(encoding="utf-8")
        except OSError:
            return None
        props = parse_properties(text)
        return cls(
            path=path,
            bintray_user=props.get("bintrayUser") or None,
            sonatype_user=props.get("sonatypeUser") or None,
        )


def parse_properties(text: str) -> dict[str, str]:
    """Minimal java ``.properties`` reader (``key=value`` / ``key: value``)."""
    result: dict[str, str] = {}
    for raw in text.splitlines():
        line = raw.strip()
        if not line or line[0] in "#!":
            continue
        positions = [pos for pos in (line.find("="), line.find(":")) if pos != -1]
        if not positions:
            result[line] = ""
            continue
        cut = min(positions)
        result[line[:cut].strip()] = line[cut + 1 :].strip()
    return result


class Notice(BaseModel):
    """A block of operator instructions; ``lines`` may contain Rich markup."""

    lines: list[str] = Field(default_factory=list)


def collect_notices(
    settings: Settings,
    context: RunContext,
    gradle: GradleProperties | None,
    gradle_path: Path,
) -> list[Notice]:
    """Work out which setup instructions apply.

    Args:
        settings: Final answers (as persisted, before first-release forcing).
        context: Flags of this run.
        gradle: Snapshot of the global gradle properties, or ``None``.
        gradle_path: Where that file lives (shown to the operator).
    """
    notices: list[Notice] = []
    sign_files = bool(settings.bintray_sign_files)

    bintray_missing = True
    sonatype_missing = sign_files
    if gradle is not None:
        bintray_missing = not gradle.bintray_user
        sonatype_missing = sonatype_missing and not gradle.sonatype_user

    if bintray_missing or sonatype_missing:
        lines = [
            "[red]IMPORTANT[/red] you need to add the following configurations to the global "
            "gradle file (required for release):",
            f" [green]{gradle_path}[/green]",
        ]
        if bintray_missing:
            lines += [
                "",
                f"[yellow]bintrayUser[/yellow]={settings.bintray_user or ''}",
                "[yellow]bintrayKey[/yellow]=<api key (go to bintray profile page, hit edit "
                "and access \"api keys\" section>",
            ]
        if sign_files:
            lines += [
                "",
                "If your gpg certificate requires a passphrase you need to configure it "
                "(for automatic signing):",
                "[yellow]gpgPassphrase[/yellow]=<gpgPassphrase>",
            ]
        if sonatype_missing:
            lines += [
                "",
                "If you are going to sync with maven central automatically, you need to "
                "configure the sonatype user:",
                "[yellow]sonatypeUser[/yellow]=<sonatype user>",
                "[yellow]sonatypePassword[/yellow]=<sonatype password>",
            ]
        notices.append(Notice(lines=lines))

    if not context.update_mode and settings.maven_central_sync:
        notices.append(
            Notice(
                lines=[
                    "[red]IMPORTANT[/red] Maven central sync is impossible on first release, so "
                    "it was set to false in build.gradle (read the docs for more details).",
                    "Your answer is remembered and will be used on project update.",
                ]
            )
        )
    return notices


def print_notices(notices: list[Notice]) -> None:
    for notice in notices:
        console.print()
        for line in notice.lines:
            console.print(line)
